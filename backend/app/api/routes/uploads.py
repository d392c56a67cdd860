"""Resource file upload routes."""

from fastapi import APIRouter

from app.api.deps import CurrentUser, UploaderDep, require
from app.schemas.uploads import UploadRequest, UploadUrlResponse
from app.services.permissions import Action

router = APIRouter(prefix="/api/upload", tags=["uploads"])


@router.post("", response_model=UploadUrlResponse)
async def create_upload_url(data: UploadRequest, current_user: CurrentUser, uploader: UploaderDep) -> UploadUrlResponse:
    """
    Presigned S3 POST for a resource file.

    The client uploads straight to S3 with `uploadUrl` and `fields`, then
    sets `fileUrl` on the resource it creates or updates.
    """
    require(current_user, Action.RESOURCE_UPLOAD, detail="Only counsellors and admins can upload resource files")
    upload = await uploader.create_upload(
        owner_id=current_user.id, file_name=data.file_name, content_type=data.file_type
    )
    return UploadUrlResponse(
        upload_url=upload.upload_url,
        fields=upload.fields,
        download_url=upload.download_url,
        file_url=upload.file_url,
        key=upload.key,
    )
