from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from portal_messaging.api.v1.schemas.message import MessageResponse
from portal_messaging.api.v1.schemas.user import UserResponse
from portal_messaging.domain.value_objects.enums import ConversationType


class CreateDirectConversationRequest(BaseModel):
    user_id: str


class CreateGroupConversationRequest(BaseModel):
    name: str
    description: str | None = None
    member_ids: list[str] = Field(default_factory=list)


class ConversationResponse(BaseModel):
    id: UUID
    type: ConversationType
    participants: list[str]
    unread_counts: dict[str, int]
    last_message: MessageResponse | None = None
    name: str | None = None
    description: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConversationSummaryResponse(BaseModel):
    conversation: ConversationResponse
    title: str
    subtitle: str
    unread_count: int
    last_message: MessageResponse | None = None
    other_participant: UserResponse | None = None

    model_config = {"from_attributes": True}


class MarkReadResponse(BaseModel):
    marked: int
