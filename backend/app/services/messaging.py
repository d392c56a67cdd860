"""Direct messages between users."""

import logging

from app.db.models import Message, User
from app.db.storage import ConversationSummary, Storage
from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.services.permissions import Action, can_perform

logger = logging.getLogger(__name__)


async def create_message(storage: Storage, sender: User, *, receiver_id: str, content: str) -> Message:
    """Send `content` from `sender` to an existing user other than themselves."""
    if not can_perform(sender.role, Action.MESSAGE_SEND):
        raise AuthorizationError("You are not allowed to send messages")
    if receiver_id == sender.id:
        raise ValidationError("You cannot send a message to yourself")
    if await storage.get_user(receiver_id) is None:
        raise ValidationError("receiverId must refer to an existing user")

    message = await storage.create_message(sender_id=sender.id, receiver_id=receiver_id, content=content)
    logger.debug("Message %s sent from %s to %s", message.id, sender.id, receiver_id)
    return message


async def list_conversation(storage: Storage, user_a: str, user_b: str) -> list[Message]:
    """Messages in both directions between two users, oldest first."""
    return await storage.list_messages_between(user_a, user_b)


async def list_conversations(storage: Storage, user: User) -> list[ConversationSummary]:
    return await storage.list_conversations(user.id)


async def mark_read(storage: Storage, caller: User, message_id: int) -> Message:
    """Mark a message read. Only its receiver (or an admin) may do so."""
    message = await storage.get_message(message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if not can_perform(caller.role, Action.MESSAGE_MARK_READ, message.receiver_id, caller.id):
        raise AuthorizationError("Only the receiver can mark a message as read")
    return await storage.mark_message_read(message)
