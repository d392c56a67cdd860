"""Pydantic schemas for API request/response validation."""

from app.schemas.base import MessageResponse
from app.schemas.user import UserRead, UserRoleUpdate
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from app.schemas.resources import ResourceCreate, ResourceRead, ResourceUpdate
from app.schemas.sessions import SessionCreate, SessionRead, SessionUpdate, SessionWithUsersRead
from app.schemas.messages import ConversationRead, MessageCreate, MessageRead
from app.schemas.progress import ProgressRead, ProgressUpdate
from app.schemas.uploads import UploadRequest, UploadUrlResponse
from app.schemas.analytics import SystemStats

__all__ = [
    "MessageResponse",
    # User
    "UserRead",
    "UserRoleUpdate",
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    # Resources
    "ResourceCreate",
    "ResourceRead",
    "ResourceUpdate",
    # Sessions
    "SessionCreate",
    "SessionRead",
    "SessionUpdate",
    "SessionWithUsersRead",
    # Messages
    "ConversationRead",
    "MessageCreate",
    "MessageRead",
    # Progress
    "ProgressRead",
    "ProgressUpdate",
    # Uploads
    "UploadRequest",
    "UploadUrlResponse",
    # Analytics
    "SystemStats",
]
