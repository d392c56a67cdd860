"""Registration, login and bearer-token validation."""

import hashlib
import hmac
import logging
import secrets

from sqlalchemy.exc import IntegrityError

from app.db.models import User, UserRole
from app.db.storage import Storage
from app.errors import AuthenticationError, ConflictError
from app.services.tokens import SessionTokenService

logger = logging.getLogger(__name__)


def generate_salt() -> str:
    return secrets.token_hex(16)


def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((password + salt).encode("utf-8")).hexdigest()


def verify_password(password: str, salt: str, expected_hash: str) -> bool:
    return hmac.compare_digest(hash_password(password, salt), expected_hash)


class AuthService:
    """
    Credential checks on top of a SessionTokenService.

    One instance lives on app.state for the lifetime of the process;
    storage is passed per call because it is bound to the request's
    database session.
    """

    def __init__(self, tokens: SessionTokenService):
        self.tokens = tokens

    async def register(
        self,
        storage: Storage,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole,
    ) -> User:
        """Create an account. Raises ConflictError if the email is taken."""
        email = email.lower()
        if await storage.get_user_by_email(email) is not None:
            raise ConflictError("User with this email already exists")

        salt = generate_salt()
        try:
            user = await storage.create_user(
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=role,
                password_hash=hash_password(password, salt),
                password_salt=salt,
            )
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("User with this email already exists") from exc
        logger.info("Registered %s account %s", role.value, user.id)
        return user

    async def login(self, storage: Storage, *, email: str, password: str) -> tuple[User, str]:
        """Check credentials and issue a token. Raises AuthenticationError on mismatch."""
        user = await storage.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_salt, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError("Invalid credentials")

        token = await self.tokens.issue(user.id)
        logger.info("User %s logged in", user.id)
        return user, token

    async def validate_session(self, storage: Storage, token: str) -> User | None:
        """Resolve a bearer token to its user, or None."""
        user_id = await self.tokens.validate(token)
        if user_id is None:
            return None
        return await storage.get_user(user_id)

    async def logout(self, token: str) -> None:
        await self.tokens.revoke(token)
