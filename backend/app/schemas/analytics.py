"""Analytics schemas."""

from app.schemas.base import BaseSchema


class SystemStats(BaseSchema):
    total_users: int
    total_students: int
    total_counsellors: int
    total_sessions: int
    total_resources: int
    completed_sessions: int
