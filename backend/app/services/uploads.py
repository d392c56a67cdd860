"""S3 presigned URLs for resource files (worksheets, audio, video)."""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import quote
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import get_settings
from app.errors import InternalError, ServiceUnavailableError, ValidationError

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class PresignedUpload:
    key: str
    upload_url: str
    fields: dict[str, str]
    download_url: str
    file_url: str


def safe_file_name(file_name: str) -> str:
    """Last path component of a client-supplied name, with spaces collapsed to dashes."""
    name = PurePosixPath(file_name.replace("\\", "/")).name.strip()
    if name in ("", ".", ".."):
        raise ValidationError("fileName must name a file")
    return "-".join(name.split())


class UploadService:
    """
    Hands out presigned S3 URLs so clients upload resource files directly.

    The browser POSTs the file to `upload_url` with `fields`; the returned
    `file_url` is what goes into a resource's fileUrl afterwards.
    """

    def __init__(self, bucket: str | None = None, client: Any = None):
        """Initialize S3 client with settings."""
        self.bucket = bucket if bucket is not None else settings.uploads_bucket
        self.endpoint_url = settings.aws_s3_endpoint_url
        if client is None:
            client_kwargs: dict[str, Any] = {"region_name": settings.aws_region}
            # Support MinIO / LocalStack by pointing to a custom endpoint
            if self.endpoint_url:
                client_kwargs["endpoint_url"] = self.endpoint_url
            client = boto3.client("s3", **client_kwargs)
        self.s3_client = client

    def object_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quote(key)}"
        return f"https://{self.bucket}.s3.{settings.aws_region}.amazonaws.com/{quote(key)}"

    async def create_upload(self, *, owner_id: str, file_name: str, content_type: str) -> PresignedUpload:
        """
        Presign an upload of one file for `owner_id`.

        Raises:
            ServiceUnavailableError: no bucket configured
            InternalError: S3 refused to sign
        """
        if not self.bucket:
            raise ServiceUnavailableError("File uploads are not configured")

        key = f"resources/{owner_id}/{uuid4().hex}-{safe_file_name(file_name)}"
        try:
            presigned = self.s3_client.generate_presigned_post(
                self.bucket,
                key,
                Fields={"Content-Type": content_type},
                Conditions=[
                    {"Content-Type": content_type},
                    ["content-length-range", 1, settings.max_upload_size_bytes],
                ],
                ExpiresIn=settings.upload_url_expiry_seconds,
            )
            download_url = self.s3_client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=settings.download_url_expiry_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Failed to presign upload %s", key)
            raise InternalError("Failed to generate upload URL") from exc

        logger.info("Upload URL issued to %s for %s", owner_id, key)
        return PresignedUpload(
            key=key,
            upload_url=presigned["url"],
            fields=presigned["fields"],
            download_url=download_url,
            file_url=self.object_url(key),
        )


upload_service = UploadService()
