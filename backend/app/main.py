"""
Youth Empowerment Hub FastAPI Application Entry Point.

Run with: uvicorn app.main:app --reload
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.api.deps import DbSession
from app.api.routes import (
    analytics,
    auth,
    messages,
    progress,
    resources,
    sessions,
    uploads,
    users,
)
from app.config import Settings, get_settings, sanitize_error
from app.db.seed import seed_dev_users
from app.db.session import AsyncSessionLocal, check_connection
from app.db.storage import Storage
from app.errors import AppError
from app.services.auth_service import AuthService
from app.services.tokens import (
    DatabaseTokenStore,
    InMemoryTokenStore,
    SessionTokenService,
    TokenStore,
    run_sweeper,
)

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_auth_service(settings: Settings) -> AuthService:
    """Wire the token store selected in settings into an AuthService."""
    store: TokenStore
    if settings.token_store == "database":
        store = DatabaseTokenStore(AsyncSessionLocal)
    else:
        store = InMemoryTokenStore()
    tokens = SessionTokenService(store, ttl=timedelta(hours=settings.token_ttl_hours))
    return AuthService(tokens)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    # Startup
    app.state.auth_service = build_auth_service(settings)
    sweeper = asyncio.create_task(
        run_sweeper(app.state.auth_service.tokens, settings.token_sweep_interval_seconds)
    )
    if settings.seed_dev_users and settings.environment == "development":
        async with AsyncSessionLocal() as db:
            await seed_dev_users(Storage(db), app.state.auth_service, settings.dev_user_password)
    logger.info("%s started (%s, token store: %s)", settings.app_name, settings.environment, settings.token_store)
    yield
    # Shutdown
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper


app = FastAPI(
    title=settings.app_name,
    description="Counselling sessions, CBT resources and messaging for students and counsellors",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    body: dict = {"message": exc.message}
    if exc.errors:
        body["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"message": "Validation failed", "errors": errors}),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": sanitize_error(exc)},
    )


# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(resources.router)
app.include_router(sessions.router)
app.include_router(messages.router)
app.include_router(progress.router)
app.include_router(uploads.router)
app.include_router(analytics.router)


@app.get("/health")
async def health_check(db: DbSession) -> JSONResponse:
    """Liveness plus database connectivity."""
    connected = await check_connection(db)
    return JSONResponse(
        status_code=status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if connected else "unhealthy",
            "database": "connected" if connected else "disconnected",
            "environment": settings.environment,
        },
    )
