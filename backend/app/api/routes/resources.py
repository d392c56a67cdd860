"""CBT resource CRUD routes."""

from fastapi import APIRouter, status

from app.api.deps import CurrentUser, StorageDep, require
from app.db.models import ResourceType
from app.errors import NotFoundError
from app.schemas.base import MessageResponse
from app.schemas.resources import ResourceCreate, ResourceRead, ResourceUpdate
from app.services.permissions import Action

router = APIRouter(prefix="/api/resources", tags=["resources"])


@router.get("", response_model=list[ResourceRead])
async def list_resources(
    current_user: CurrentUser,
    storage: StorageDep,
    type: ResourceType | None = None,
) -> list[ResourceRead]:
    """
    List active resources, newest first.

    Filters:
    - type: worksheet, video, audio or interactive
    """
    require(current_user, Action.RESOURCE_VIEW)
    return [ResourceRead.model_validate(r) for r in await storage.list_resources(type)]


@router.post("", response_model=ResourceRead, status_code=status.HTTP_201_CREATED)
async def create_resource(
    data: ResourceCreate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> ResourceRead:
    """Create a resource. Counsellors and admins only."""
    require(current_user, Action.RESOURCE_CREATE, detail="Only counsellors and admins can add resources")
    resource = await storage.create_resource(uploaded_by=current_user.id, **data.model_dump())
    await storage.commit()
    return ResourceRead.model_validate(resource)


@router.get("/{resource_id}", response_model=ResourceRead)
async def get_resource(resource_id: int, current_user: CurrentUser, storage: StorageDep) -> ResourceRead:
    """Get a specific resource by ID."""
    require(current_user, Action.RESOURCE_VIEW)
    resource = await storage.get_resource(resource_id)
    if resource is None:
        raise NotFoundError("Resource not found")
    return ResourceRead.model_validate(resource)


@router.patch("/{resource_id}", response_model=ResourceRead)
async def update_resource(
    resource_id: int,
    data: ResourceUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> ResourceRead:
    """Update a resource. Admins, or the counsellor who uploaded it."""
    resource = await storage.get_resource(resource_id)
    if resource is None:
        raise NotFoundError("Resource not found")
    require(current_user, Action.RESOURCE_UPDATE, resource.uploaded_by)
    resource = await storage.update_resource(resource, data.model_dump(exclude_unset=True))
    await storage.commit()
    return ResourceRead.model_validate(resource)


@router.delete("/{resource_id}", response_model=MessageResponse)
async def delete_resource(resource_id: int, current_user: CurrentUser, storage: StorageDep) -> MessageResponse:
    """Soft-delete a resource (it stops being listed)."""
    resource = await storage.get_resource(resource_id)
    if resource is None:
        raise NotFoundError("Resource not found")
    require(current_user, Action.RESOURCE_DELETE, resource.uploaded_by)
    await storage.deactivate_resource(resource)
    await storage.commit()
    return MessageResponse(message="Resource deleted successfully")
