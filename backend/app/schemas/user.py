"""User schemas."""

from datetime import datetime

from app.db.models import UserRole
from app.schemas.base import BaseSchema


class UserRead(BaseSchema):
    """Schema for reading user data. Never includes password material."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    profile_image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class UserRoleUpdate(BaseSchema):
    """Admin-only role change."""

    role: UserRole
