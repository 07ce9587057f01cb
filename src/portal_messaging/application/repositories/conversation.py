from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.entities.message import Message


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...

    async def get_direct(self, user_a: str, user_b: str) -> Conversation | None:
        """Find the direct conversation of an unordered pair."""
        ...

    async def list_for_participant(self, user_id: str) -> list[Conversation]:
        """All conversations ``user_id`` takes part in, in creation order."""
        ...


class ConversationWriter(Protocol):
    async def create(self, conversation: Conversation) -> Conversation: ...

    async def record_last_message(self, conversation_id: UUID, message: Message) -> None:
        """Point ``last_message`` at ``message`` unless a newer one is already recorded."""
        ...

    async def increment_unread(self, conversation_id: UUID, user_ids: Iterable[str]) -> None: ...

    async def reset_unread(self, conversation_id: UUID, user_id: str) -> None: ...

    async def delete(self, conversation_id: UUID) -> None: ...
