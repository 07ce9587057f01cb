from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from portal_messaging.domain.value_objects.enums import MessageType
from portal_messaging.services.attachment_handler import human_readable_size


class SendMessageRequest(BaseModel):
    content: str = Field(min_length=1)


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: str
    content: str
    timestamp: datetime
    read: bool
    type: MessageType
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    file_url: str | None = None
    is_previewable: bool = False

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def file_size_label(self) -> str | None:
        return human_readable_size(self.file_size) if self.file_size is not None else None


class FileResultResponse(BaseModel):
    file_name: str
    ok: bool
    message: MessageResponse | None = None
    error: str | None = None
