"""Resource file upload schemas."""

from pydantic import Field

from app.schemas.base import BaseSchema


class UploadRequest(BaseSchema):
    file_name: str = Field(..., min_length=1, max_length=255)
    file_type: str = Field(..., pattern=r"^[\w.+-]+/[\w.+-]+$", description="MIME type, e.g. application/pdf")


class UploadUrlResponse(BaseSchema):
    """Where to send the file and where it can be read afterwards."""

    upload_url: str
    fields: dict[str, str]
    download_url: str
    file_url: str
    key: str
    message: str = "Upload URL generated successfully"
