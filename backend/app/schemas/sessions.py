"""Counselling session schemas."""

from datetime import datetime

from pydantic import Field

from app.db.models import SessionStatus, SessionType
from app.schemas.base import BaseSchema


class SessionCreate(BaseSchema):
    """
    Schema for booking a session.

    student_id is optional; when present it must be the caller's own id.
    """

    counsellor_id: str = Field(..., min_length=1)
    scheduled_at: datetime
    student_id: str | None = None
    type: SessionType = SessionType.INDIVIDUAL
    notes: str | None = None
    student_notes: str | None = None


class SessionUpdate(BaseSchema):
    """Schema for updating a session. All fields optional."""

    status: SessionStatus | None = None
    notes: str | None = None
    student_notes: str | None = None


class SessionRead(BaseSchema):
    id: int
    student_id: str
    counsellor_id: str
    scheduled_at: datetime
    status: SessionStatus
    type: SessionType
    notes: str | None
    student_notes: str | None
    created_at: datetime
    updated_at: datetime


class SessionWithUsersRead(BaseSchema):
    """Admin listing row: session plus both parties' names and emails."""

    id: int
    scheduled_at: datetime
    status: SessionStatus
    type: SessionType
    notes: str | None
    student_id: str
    counsellor_id: str
    student_name: str
    student_email: str
    counsellor_name: str
    counsellor_email: str
