from __future__ import annotations

from portal_messaging.application.exceptions import ForbiddenError, NotFoundError
from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.entities.user import User


def assert_conversation_access(
    conversation: Conversation | None,
    user_id: str,
) -> Conversation:
    """Raise if conversation doesn't exist or user is not a participant."""
    if conversation is None:
        raise NotFoundError("Conversation not found")

    if not conversation.has_participant(user_id):
        raise ForbiddenError("Not a participant of this conversation")

    return conversation


def assert_can_delete(conversation: Conversation, user: User) -> None:
    if user.is_admin or conversation.created_by == user.id:
        return
    raise ForbiddenError("Only admins or the creator can delete a conversation")


def assert_admin(user: User) -> None:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
