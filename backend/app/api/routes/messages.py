"""Messaging routes."""

from fastapi import APIRouter, BackgroundTasks, status

from app.api.deps import CurrentUser, NotifierDep, StorageDep
from app.schemas.base import MessageResponse
from app.schemas.messages import ConversationRead, MessageCreate, MessageRead
from app.services import messaging

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    notifier: NotifierDep,
    background_tasks: BackgroundTasks,
) -> MessageRead:
    """Send a message to another user."""
    message = await messaging.create_message(
        storage, current_user, receiver_id=data.receiver_id, content=data.content
    )
    await storage.commit()
    background_tasks.add_task(
        notifier.notify_message_received,
        user_id=message.receiver_id,
        message_id=message.id,
        sender_name=current_user.full_name,
    )
    return MessageRead.model_validate(message)


@router.get("/conversations", response_model=list[ConversationRead])
async def list_conversations(current_user: CurrentUser, storage: StorageDep) -> list[ConversationRead]:
    """One entry per conversation partner, most recent first."""
    return [ConversationRead.model_validate(c) for c in await messaging.list_conversations(storage, current_user)]


@router.get("/{user_id}", response_model=list[MessageRead])
async def get_conversation(user_id: str, current_user: CurrentUser, storage: StorageDep) -> list[MessageRead]:
    """Messages exchanged with `user_id`, oldest first."""
    messages = await messaging.list_conversation(storage, current_user.id, user_id)
    return [MessageRead.model_validate(m) for m in messages]


@router.patch("/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(message_id: int, current_user: CurrentUser, storage: StorageDep) -> MessageResponse:
    await messaging.mark_read(storage, current_user, message_id)
    await storage.commit()
    return MessageResponse(message="Message marked as read")
