from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from portal_messaging.domain.value_objects.enums import MessageType


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID | None  # assigned on append when missing
    conversation_id: UUID
    sender_id: str
    content: str
    timestamp: datetime
    read: bool = False
    type: MessageType = MessageType.TEXT
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    file_url: str | None = None

    @property
    def is_file(self) -> bool:
        return self.type == MessageType.FILE

    @property
    def is_previewable(self) -> bool:
        return self.is_file and (self.file_type or "").startswith("image/")
