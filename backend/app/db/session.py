"""Async engine, request-scoped sessions and the health check."""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    options: dict[str, Any] = {
        "echo": settings.debug,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }
    # asyncpg takes SSL through connect_args, not the URL
    if settings.database_requires_ssl:
        options["connect_args"] = {"ssl": "require"}
    return create_async_engine(settings.database_url, **options)


engine = build_engine(get_settings())

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    Commits when the handler returns normally and rolls back if it raises,
    so routes only call commit themselves when they need generated ids
    before responding.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_connection(session: AsyncSession) -> bool:
    """Return True if the database answers a trivial query."""
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Database connectivity check failed")
        return False
    return True
