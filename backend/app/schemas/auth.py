"""Authentication schemas."""

from pydantic import EmailStr, Field

from app.db.models import UserRole
from app.schemas.base import BaseSchema
from app.schemas.user import UserRead


class RegisterRequest(BaseSchema):
    """Request schema for account registration."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=256)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole


class LoginRequest(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterResponse(BaseSchema):
    user: UserRead
    message: str


class LoginResponse(BaseSchema):
    """Response schema for successful login. `token` goes in the Authorization header."""

    user: UserRead
    token: str
    message: str
