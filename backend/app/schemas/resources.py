"""CBT resource schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.db.models import ResourceType
from app.schemas.base import BaseSchema


def _check_url(value: str | None) -> str | None:
    if value is not None and not value.startswith(("http://", "https://")):
        raise ValueError("fileUrl must be an http(s) URL")
    return value


class ResourceCreate(BaseSchema):
    """Schema for creating a resource."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    type: ResourceType
    file_url: str | None = Field(None, max_length=2048)
    duration: int | None = Field(None, gt=0, description="Length in minutes")

    @field_validator("file_url")
    @classmethod
    def validate_file_url(cls, value: str | None) -> str | None:
        return _check_url(value)


class ResourceUpdate(BaseSchema):
    """Schema for updating a resource. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    type: ResourceType | None = None
    file_url: str | None = Field(None, max_length=2048)
    duration: int | None = Field(None, gt=0)
    is_active: bool | None = None

    @field_validator("title", "type", "is_active")
    @classmethod
    def reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        # Omit the field to leave it unchanged; these columns are NOT NULL
        if value is None:
            raise ValueError(f"{to_camel(info.field_name)} cannot be null")
        return value

    @field_validator("file_url")
    @classmethod
    def validate_file_url(cls, value: str | None) -> str | None:
        return _check_url(value)


class ResourceRead(BaseSchema):
    id: int
    title: str
    description: str | None
    type: ResourceType
    file_url: str | None
    duration: int | None
    uploaded_by: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
