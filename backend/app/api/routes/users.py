"""User management routes."""

import logging

from fastapi import APIRouter

from app.api.deps import CurrentUser, StorageDep, require
from app.db.models import UserRole
from app.errors import NotFoundError
from app.schemas.user import UserRead, UserRoleUpdate
from app.services.permissions import Action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(current_user: CurrentUser, storage: StorageDep) -> list[UserRead]:
    """List every account, oldest first. Admin only."""
    require(current_user, Action.USER_LIST)
    return [UserRead.model_validate(u) for u in await storage.list_users()]


@router.get("/role/{role}", response_model=list[UserRead])
async def list_users_by_role(role: UserRole, current_user: CurrentUser, storage: StorageDep) -> list[UserRead]:
    """List accounts with a given role (e.g. counsellors to book with)."""
    return [UserRead.model_validate(u) for u in await storage.list_users_by_role(role)]


@router.patch("/{user_id}/role", response_model=UserRead)
async def update_user_role(
    user_id: str,
    data: UserRoleUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> UserRead:
    """Change a user's role. Admin only."""
    require(current_user, Action.USER_CHANGE_ROLE)
    user = await storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    previous = user.role
    user = await storage.update_user_role(user, data.role)
    await storage.commit()
    logger.info("Admin %s changed role of %s from %s to %s", current_user.id, user.id, previous.value, user.role.value)
    return UserRead.model_validate(user)
