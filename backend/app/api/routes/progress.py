"""Resource progress routes."""

from fastapi import APIRouter

from app.api.deps import CurrentUser, StorageDep
from app.schemas.progress import ProgressRead, ProgressUpdate
from app.services import progress as progress_service

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.post("", response_model=ProgressRead)
async def record_progress(data: ProgressUpdate, current_user: CurrentUser, storage: StorageDep) -> ProgressRead:
    """Create or update the caller's progress on a resource."""
    row = await progress_service.upsert_progress(
        storage, current_user, resource_id=data.resource_id, progress=data.progress
    )
    await storage.commit()
    return ProgressRead.model_validate(row)


@router.get("", response_model=list[ProgressRead])
async def list_my_progress(current_user: CurrentUser, storage: StorageDep) -> list[ProgressRead]:
    """The caller's progress rows, most recently updated first."""
    return [ProgressRead.model_validate(p) for p in await storage.list_progress_for_user(current_user.id)]


@router.get("/resource/{resource_id}", response_model=list[ProgressRead])
async def list_resource_progress(resource_id: int, current_user: CurrentUser, storage: StorageDep) -> list[ProgressRead]:
    """Everyone's progress on one resource. Admins or the resource's uploader."""
    rows = await progress_service.list_progress_for_resource(storage, current_user, resource_id)
    return [ProgressRead.model_validate(p) for p in rows]
