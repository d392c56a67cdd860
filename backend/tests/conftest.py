"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass, field

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_notifier
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.services.auth_service import AuthService
from app.services.tokens import InMemoryTokenStore, SessionTokenService

DEFAULT_PASSWORD = "pw12345678"


class RecordingNotifier:
    """Stands in for the SNS notification service and records every call."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []

    def notify_session_booked(self, **kwargs) -> None:
        self.calls.append(("session_booking", kwargs))

    def notify_session_updated(self, **kwargs) -> None:
        self.calls.append(("session_update", kwargs))

    def notify_message_received(self, **kwargs) -> None:
        self.calls.append(("message_received", kwargs))

    def of_type(self, kind: str) -> list[dict]:
        return [kwargs for name, kwargs in self.calls if name == kind]


@dataclass
class LoggedInUser:
    id: str
    email: str
    role: str
    token: str
    data: dict = field(default_factory=dict)

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """In-memory SQLite database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
def auth_service() -> AuthService:
    return AuthService(SessionTokenService(InMemoryTokenStore()))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_service: AuthService,
    notifier: RecordingNotifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.state.auth_service = auth_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client: AsyncClient) -> Callable[..., Awaitable[LoggedInUser]]:
    """Register an account and log it in."""

    async def _make_user(
        email: str,
        role: str = "student",
        *,
        first_name: str = "Test",
        last_name: str = "User",
        password: str = DEFAULT_PASSWORD,
    ) -> LoggedInUser:
        response = await client.post(
            "/api/register",
            json={
                "email": email,
                "password": password,
                "firstName": first_name,
                "lastName": last_name,
                "role": role,
            },
        )
        assert response.status_code == 200, response.text
        response = await client.post("/api/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        body = response.json()
        return LoggedInUser(
            id=body["user"]["id"],
            email=email,
            role=role,
            token=body["token"],
            data=body["user"],
        )

    return _make_user


@pytest.fixture
async def alice(make_user) -> LoggedInUser:
    return await make_user("alice@example.com", "student", first_name="Alice", last_name="Smith")


@pytest.fixture
async def drbob(make_user) -> LoggedInUser:
    return await make_user("drbob@example.com", "counsellor", first_name="Bob", last_name="Jones")


@pytest.fixture
async def admin(make_user) -> LoggedInUser:
    return await make_user("admin@example.com", "admin", first_name="Ada", last_name="Admin")
