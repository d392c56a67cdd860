"""Message schemas."""

from datetime import datetime

from pydantic import Field

from app.db.models import MessageStatus
from app.schemas.base import BaseSchema


class MessageCreate(BaseSchema):
    receiver_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=10000)


class MessageRead(BaseSchema):
    id: int
    sender_id: str
    receiver_id: str
    content: str
    status: MessageStatus
    created_at: datetime


class ConversationRead(BaseSchema):
    """One conversation partner with the latest message and unread count."""

    partner_id: str
    partner_name: str
    last_message: MessageRead
    unread_count: int
