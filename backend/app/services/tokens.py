"""
Bearer-token sessions.

SessionTokenService issues opaque 256-bit tokens mapped to a user id with
an expiry. Where the mapping lives is up to the TokenStore passed in:
InMemoryTokenStore keeps it in a dict (lost on restart), DatabaseTokenStore
keeps it in the auth_tokens table. Stores are keyed by the SHA-256 digest
of the token, never the token itself.
"""

import asyncio
import hashlib
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models import AuthToken

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class TokenRecord:
    user_id: str
    expires_at: datetime


class TokenStore(Protocol):
    """Persistence for token records, keyed by token digest."""

    async def put(self, key: str, record: TokenRecord) -> None: ...

    async def get(self, key: str) -> TokenRecord | None: ...

    async def delete(self, key: str) -> None: ...

    async def purge_expired(self, now: datetime) -> int: ...


class InMemoryTokenStore:
    """Process-local token store. All sessions are lost on restart."""

    def __init__(self):
        self._records: dict[str, TokenRecord] = {}

    async def put(self, key: str, record: TokenRecord) -> None:
        self._records[key] = record

    async def get(self, key: str) -> TokenRecord | None:
        return self._records.get(key)

    async def delete(self, key: str) -> None:
        self._records.pop(key, None)

    async def purge_expired(self, now: datetime) -> int:
        expired = [key for key, record in self._records.items() if record.expires_at <= now]
        for key in expired:
            del self._records[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)


class DatabaseTokenStore:
    """Token store backed by the auth_tokens table. Each call uses its own session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def put(self, key: str, record: TokenRecord) -> None:
        async with self.session_factory() as db:
            db.add(AuthToken(token_hash=key, user_id=record.user_id, expires_at=record.expires_at))
            await db.commit()

    async def get(self, key: str) -> TokenRecord | None:
        async with self.session_factory() as db:
            row = await db.get(AuthToken, key)
            if row is None:
                return None
            return TokenRecord(user_id=row.user_id, expires_at=_as_utc(row.expires_at))

    async def delete(self, key: str) -> None:
        async with self.session_factory() as db:
            await db.execute(delete(AuthToken).where(AuthToken.token_hash == key))
            await db.commit()

    async def purge_expired(self, now: datetime) -> int:
        async with self.session_factory() as db:
            result = await db.execute(select(AuthToken.token_hash).where(AuthToken.expires_at <= now))
            keys = list(result.scalars())
            if keys:
                await db.execute(delete(AuthToken).where(AuthToken.token_hash.in_(keys)))
                await db.commit()
            return len(keys)


class SessionTokenService:
    """Issue, validate and revoke bearer tokens."""

    def __init__(self, store: TokenStore, ttl: timedelta = timedelta(hours=24), clock: Clock = _utcnow):
        self.store = store
        self.ttl = ttl
        self.clock = clock

    async def issue(self, user_id: str) -> str:
        token = secrets.token_hex(32)
        await self.store.put(hash_token(token), TokenRecord(user_id=user_id, expires_at=self.clock() + self.ttl))
        return token

    async def validate(self, token: str) -> str | None:
        """Return the user id for a live token, None for unknown or expired tokens."""
        if not token:
            return None
        record = await self.store.get(hash_token(token))
        if record is None or record.expires_at <= self.clock():
            return None
        return record.user_id

    async def revoke(self, token: str) -> None:
        await self.store.delete(hash_token(token))

    async def sweep(self) -> int:
        """Drop expired records. Returns how many were removed."""
        return await self.store.purge_expired(self.clock())


async def run_sweeper(service: SessionTokenService, interval_seconds: float) -> None:
    """Purge expired tokens every `interval_seconds` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await service.sweep()
        except Exception:
            logger.exception("Token sweep failed")
            continue
        if removed:
            logger.info("Token sweep removed %d expired tokens", removed)
