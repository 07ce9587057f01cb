from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from portal_messaging.domain.value_objects.enums import NotificationType


@dataclass(frozen=True, slots=True)
class Notification:
    """A single recipient's copy of a notification.

    Instances are never shared between users: read and delete state belong to
    ``user_id`` alone.
    """

    id: UUID
    user_id: str
    type: NotificationType
    title: str
    message: str
    timestamp: datetime
    read: bool = False
    action_data: dict[str, Any] = field(default_factory=dict)
