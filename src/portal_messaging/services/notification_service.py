from __future__ import annotations

import logging
import uuid
from typing import Any

from portal_messaging.application.context import MessagingContext
from portal_messaging.application.exceptions import ForbiddenError, NotFoundError
from portal_messaging.application.uow import UnitOfWork
from portal_messaging.domain.entities.notification import Notification
from portal_messaging.domain.value_objects.enums import NotificationType

logger = logging.getLogger(__name__)


async def list_notifications(user_id: str, uow: UnitOfWork) -> list[Notification]:
    return await uow.notifications.list_for_user(user_id)


async def unread_notification_count(user_id: str, uow: UnitOfWork) -> int:
    return await uow.notifications.count_unread(user_id)


async def add_notification(
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    uow: UnitOfWork,
    ctx: MessagingContext,
    *,
    action_data: dict[str, Any] | None = None,
) -> Notification:
    notification = Notification(
        id=ctx.ids.new_id(),
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        timestamp=ctx.clock.now(),
        action_data=action_data or {},
    )
    notification = await uow.notifications_w.add(notification)
    await uow.commit()
    return notification


async def mark_notification_read(
    notification_id: uuid.UUID,
    user_id: str,
    uow: UnitOfWork,
) -> None:
    await _get_own(notification_id, user_id, uow)
    await uow.notifications_w.mark_read(notification_id)
    await uow.commit()


async def mark_all_notifications_read(user_id: str, uow: UnitOfWork) -> int:
    changed = await uow.notifications_w.mark_all_read(user_id)
    await uow.commit()
    return changed


async def delete_notification(
    notification_id: uuid.UUID,
    user_id: str,
    uow: UnitOfWork,
) -> None:
    await _get_own(notification_id, user_id, uow)
    await uow.notifications_w.delete(notification_id)
    await uow.commit()


async def clear_notifications(user_id: str, uow: UnitOfWork) -> int:
    removed = await uow.notifications_w.clear(user_id)
    await uow.commit()
    logger.info("Cleared %d notifications for %s", removed, user_id)
    return removed


async def _get_own(
    notification_id: uuid.UUID,
    user_id: str,
    uow: UnitOfWork,
) -> Notification:
    notification = await uow.notifications.get_by_id(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise ForbiddenError("Notification belongs to another user")
    return notification
