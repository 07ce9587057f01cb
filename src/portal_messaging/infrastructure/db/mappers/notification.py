from __future__ import annotations

from portal_messaging.domain.entities.notification import Notification
from portal_messaging.domain.value_objects.enums import NotificationType
from portal_messaging.infrastructure.db.mappers.message import as_aware
from portal_messaging.infrastructure.db.models.notification import NotificationModel


def model_to_entity(model: NotificationModel) -> Notification:
    return Notification(
        id=model.id,
        user_id=model.user_id,
        type=NotificationType(model.type),
        title=model.title,
        message=model.message,
        timestamp=as_aware(model.timestamp),
        read=model.read,
        action_data=dict(model.action_data or {}),
    )


def entity_to_model(entity: Notification) -> NotificationModel:
    return NotificationModel(
        id=entity.id,
        user_id=entity.user_id,
        type=entity.type.value,
        title=entity.title,
        message=entity.message,
        timestamp=entity.timestamp,
        read=entity.read,
        action_data=dict(entity.action_data),
    )
