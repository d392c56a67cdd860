"""Progress tracking schemas."""

from datetime import datetime

from pydantic import Field

from app.schemas.base import BaseSchema


class ProgressUpdate(BaseSchema):
    resource_id: int = Field(..., gt=0)
    progress: int = Field(..., ge=0, le=100, description="Percentage complete")


class ProgressRead(BaseSchema):
    id: int
    user_id: str
    resource_id: int
    progress: int
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime
