from __future__ import annotations

from dataclasses import dataclass

from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.entities.user import User


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """A conversation as one particular user sees it in their inbox."""

    conversation: Conversation
    title: str
    subtitle: str
    unread_count: int
    last_message: Message | None
    other_participant: User | None = None
