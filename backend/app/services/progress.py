"""Per-user progress on CBT resources."""

from datetime import datetime, timezone

from app.db.models import User, UserProgress
from app.db.storage import Storage
from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.services.permissions import Action, can_perform

MIN_PROGRESS = 0
MAX_PROGRESS = 100


async def upsert_progress(
    storage: Storage,
    caller: User,
    *,
    resource_id: int,
    progress: int,
    now: datetime | None = None,
) -> UserProgress:
    """
    Record the caller's progress on a resource.

    Progress is always recorded for the caller, so any authenticated user may
    call this. Updates the existing (user, resource) row in place or inserts
    one. Reaching 100 stamps completed_at; falling below 100 clears it.
    """
    if not MIN_PROGRESS <= progress <= MAX_PROGRESS:
        raise ValidationError(f"progress must be between {MIN_PROGRESS} and {MAX_PROGRESS}")

    resource = await storage.get_resource(resource_id)
    if resource is None or not resource.is_active:
        raise NotFoundError("Resource not found")

    now = now or datetime.now(timezone.utc)
    return await storage.upsert_progress(
        user_id=caller.id,
        resource_id=resource_id,
        progress=progress,
        completed_at=now if progress == MAX_PROGRESS else None,
        now=now,
    )


async def list_progress_for_resource(storage: Storage, caller: User, resource_id: int) -> list[UserProgress]:
    """All users' progress on one resource; admin or the resource's uploader only."""
    resource = await storage.get_resource(resource_id)
    if resource is None:
        raise NotFoundError("Resource not found")
    if not can_perform(caller.role, Action.PROGRESS_VIEW_RESOURCE, resource.uploaded_by, caller.id):
        raise AuthorizationError()
    return await storage.list_progress_for_resource(resource_id)
