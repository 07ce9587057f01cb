"""Fan-out of "new message" notifications to conversation participants."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from portal_messaging.application.ports.bus import EventPublisher
from portal_messaging.application.ports.clock import Clock
from portal_messaging.application.ports.ids import IdGenerator
from portal_messaging.application.uow import UnitOfWorkFactory
from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.entities.notification import Notification
from portal_messaging.domain.entities.user import User
from portal_messaging.domain.value_objects.enums import NotificationType

logger = logging.getLogger(__name__)

NEW_MESSAGE_TITLE = "New Message"
PREVIEW_LENGTH = 50


def preview(content: str, length: int = PREVIEW_LENGTH) -> str:
    if len(content) <= length:
        return content
    return content[:length] + "…"


def notification_payload(notification: Notification) -> dict[str, Any]:
    return {
        "event_type": "notification.created",
        "id": str(notification.id),
        "user_id": notification.user_id,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "action_data": notification.action_data,
        "timestamp": notification.timestamp.isoformat(),
    }


class NotificationDispatcher:
    """Builds one notification per recipient and delivers each independently.

    ``dispatch`` only schedules work on the running loop; every recipient gets
    its own task and its own unit of work, so a failing delivery neither
    blocks nor undoes the others. Failures are logged and counted.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Clock,
        ids: IdGenerator,
        *,
        publisher: EventPublisher | None = None,
        channel: str = "portal.notifications",
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._ids = ids
        self._publisher = publisher
        self._channel = channel
        self._pending: set[asyncio.Task[None]] = set()
        self.delivered = 0
        self.failed_deliveries = 0

    def build(
        self, message: Message, conversation: Conversation, sender: User,
    ) -> list[Notification]:
        now = self._clock.now()
        body = f'{sender.name} sent you a message: "{preview(message.content)}"'
        return [
            Notification(
                id=self._ids.new_id(),
                user_id=recipient_id,
                type=NotificationType.MESSAGE,
                title=NEW_MESSAGE_TITLE,
                message=body,
                timestamp=now,
                action_data={"conversation_id": str(conversation.id)},
            )
            for recipient_id in conversation.participants
            if recipient_id != message.sender_id
        ]

    def dispatch(
        self, message: Message, conversation: Conversation, sender: User,
    ) -> list[Notification]:
        notifications = self.build(message, conversation, sender)
        for notification in notifications:
            task = asyncio.create_task(
                self._deliver(notification),
                name=f"notify-{notification.user_id}-{message.id}",
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return notifications

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    async def _deliver(self, notification: Notification) -> None:
        try:
            async with self._uow_factory() as uow:
                await uow.notifications_w.add(notification)
                await uow.commit()
        except Exception:
            self.failed_deliveries += 1
            logger.exception(
                "Notification delivery to %s failed", notification.user_id,
            )
            return

        self.delivered += 1
        logger.debug("Notification %s delivered to %s", notification.id, notification.user_id)

        if self._publisher is None:
            return
        try:
            await self._publisher.publish(self._channel, notification_payload(notification))
        except Exception:
            logger.exception("Failed to publish notification %s", notification.id)
