from __future__ import annotations

from typing import Protocol
from uuid import UUID

from portal_messaging.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_by_conversation(self, conversation_id: UUID) -> list[Message]:
        """Ascending by timestamp; equal timestamps keep insertion order."""
        ...


class MessageWriter(Protocol):
    async def append(self, message: Message) -> Message:
        """Store ``message``, giving it a fresh id when it has none. Returns the stored copy."""
        ...

    async def delete(self, message_id: UUID) -> None: ...

    async def delete_by_conversation(self, conversation_id: UUID) -> int: ...

    async def mark_read(self, conversation_id: UUID, reader_id: str) -> int:
        """Flag every message not sent by ``reader_id`` as read. Returns the number changed."""
        ...
