"""
Authentication Routes

Endpoints:
- POST /api/register - Create an account
- POST /api/signup - Same as register, answers 201
- POST /api/login - Exchange email/password for a bearer token
- POST /api/logout - Revoke the bearer token
- GET /api/auth/user - Get current user profile

Tokens are opaque and expire after the configured TTL; clients send them
as 'Authorization: Bearer <token>'.
"""

from fastapi import APIRouter, status

from app.api.deps import AuthServiceDep, CurrentUser, StorageDep, Token
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from app.schemas.base import MessageResponse
from app.schemas.user import UserRead

router = APIRouter(prefix="/api", tags=["auth"])


async def _register(data: RegisterRequest, storage: StorageDep, auth: AuthServiceDep) -> RegisterResponse:
    user = await auth.register(
        storage,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
    )
    await storage.commit()
    return RegisterResponse(user=UserRead.model_validate(user), message="User created successfully")


@router.post("/register", response_model=RegisterResponse)
async def register(data: RegisterRequest, storage: StorageDep, auth: AuthServiceDep) -> RegisterResponse:
    """Create a student, counsellor or admin account."""
    return await _register(data, storage, auth)


@router.post("/signup", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: RegisterRequest, storage: StorageDep, auth: AuthServiceDep) -> RegisterResponse:
    return await _register(data, storage, auth)


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, storage: StorageDep, auth: AuthServiceDep) -> LoginResponse:
    """Check credentials and issue a bearer token valid for the configured TTL."""
    user, token = await auth.login(storage, email=data.email, password=data.password)
    return LoginResponse(user=UserRead.model_validate(user), token=token, message="Login successful")


@router.post("/logout", response_model=MessageResponse)
async def logout(token: Token, auth: AuthServiceDep) -> MessageResponse:
    """Revoke the presented token. Unknown tokens are ignored."""
    await auth.logout(token)
    return MessageResponse(message="Logged out successfully")


@router.get("/auth/user", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Get the current authenticated user's profile."""
    return UserRead.model_validate(current_user)
