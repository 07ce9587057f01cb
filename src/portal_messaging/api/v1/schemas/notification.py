from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from portal_messaging.domain.value_objects.enums import NotificationType


class NotificationResponse(BaseModel):
    id: UUID
    user_id: str
    type: NotificationType
    title: str
    message: str
    read: bool
    action_data: dict[str, Any]
    timestamp: datetime

    model_config = {"from_attributes": True}


class CountResponse(BaseModel):
    count: int
