from __future__ import annotations

from typing import Protocol
from uuid import UUID

from portal_messaging.domain.entities.notification import Notification


class NotificationReader(Protocol):
    async def get_by_id(self, notification_id: UUID) -> Notification | None: ...

    async def list_for_user(self, user_id: str) -> list[Notification]:
        """Newest first."""
        ...

    async def count_unread(self, user_id: str) -> int: ...


class NotificationWriter(Protocol):
    async def add(self, notification: Notification) -> Notification: ...

    async def mark_read(self, notification_id: UUID) -> None: ...

    async def mark_all_read(self, user_id: str) -> int: ...

    async def delete(self, notification_id: UUID) -> None: ...

    async def clear(self, user_id: str) -> int: ...
