"""
FastAPI Dependencies for Authentication and Authorization.

Key patterns:
1. get_current_user: Resolves the bearer token through the AuthService, returns User
2. Services live on app.state and are reached through dependencies, so tests
   can swap them without touching module globals
3. No global "current user" state - always pass user explicitly

Security model:
- Opaque bearer token in the Authorization header
- Role and ownership checks go through app.services.permissions.can_perform
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import User
from app.db.session import get_db
from app.db.storage import Storage
from app.errors import AuthenticationError, AuthorizationError
from app.services.auth_service import AuthService
from app.services.notifications import NotificationService, notification_service
from app.services.permissions import Action, can_perform
from app.services.uploads import UploadService, upload_service


# =============================================================================
# SERVICES
# =============================================================================


def get_auth_service(request: Request) -> AuthService:
    """The process-wide AuthService built in the application lifespan."""
    return request.app.state.auth_service


def get_notifier() -> NotificationService:
    return notification_service


def get_uploader() -> UploadService:
    return upload_service


async def get_storage(db: Annotated[AsyncSession, Depends(get_db)]) -> Storage:
    return Storage(db)


DbSession = Annotated[AsyncSession, Depends(get_db)]
StorageDep = Annotated[Storage, Depends(get_storage)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
NotifierDep = Annotated[NotificationService, Depends(get_notifier)]
UploaderDep = Annotated[UploadService, Depends(get_uploader)]


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise AuthenticationError("Not authenticated")


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    storage: StorageDep,
    auth: AuthServiceDep,
) -> User:
    """
    Validate the bearer token and return the current authenticated user.

    Raises 401 if:
    - Token is missing, unknown, or expired
    - User no longer exists in database
    """
    user = await auth.validate_session(storage, token)
    if user is None:
        raise AuthenticationError("Could not validate credentials")
    return user


# Type aliases for dependency injection
Token = Annotated[str, Depends(get_token_from_request)]
CurrentUser = Annotated[User, Depends(get_current_user)]


# =============================================================================
# AUTHORIZATION HELPERS
# =============================================================================


def require(
    user: User,
    action: Action,
    resource_owner_id: str | None = None,
    *,
    detail: str = "Access denied",
) -> None:
    """
    Raise 403 unless `user` may perform `action`.

        resource = await storage.get_resource(resource_id)
        require(user, Action.RESOURCE_UPDATE, resource.uploaded_by)
    """
    if not can_perform(user.role, action, resource_owner_id, user.id):
        raise AuthorizationError(detail)
