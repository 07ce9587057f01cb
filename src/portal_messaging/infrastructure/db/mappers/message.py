from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.value_objects.enums import MessageType
from portal_messaging.infrastructure.db.models.message import MessageModel


def as_aware(ts: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        sender_id=model.sender_id,
        content=model.content,
        timestamp=as_aware(model.timestamp),
        read=model.read,
        type=MessageType(model.type),
        file_name=model.file_name,
        file_size=model.file_size,
        file_type=model.file_type,
        file_url=model.file_url,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        conversation_id=entity.conversation_id,
        sender_id=entity.sender_id,
        content=entity.content,
        timestamp=entity.timestamp,
        read=entity.read,
        type=entity.type.value,
        file_name=entity.file_name,
        file_size=entity.file_size,
        file_type=entity.file_type,
        file_url=entity.file_url,
    )


def entity_to_snapshot(entity: Message) -> dict[str, Any]:
    return {
        "id": str(entity.id),
        "conversation_id": str(entity.conversation_id),
        "sender_id": entity.sender_id,
        "content": entity.content,
        "timestamp": entity.timestamp.isoformat(),
        "read": entity.read,
        "type": entity.type.value,
        "file_name": entity.file_name,
        "file_size": entity.file_size,
        "file_type": entity.file_type,
        "file_url": entity.file_url,
    }


def snapshot_to_entity(data: dict[str, Any]) -> Message:
    return Message(
        id=uuid.UUID(data["id"]),
        conversation_id=uuid.UUID(data["conversation_id"]),
        sender_id=data["sender_id"],
        content=data["content"],
        timestamp=as_aware(datetime.fromisoformat(data["timestamp"])),
        read=data["read"],
        type=MessageType(data["type"]),
        file_name=data.get("file_name"),
        file_size=data.get("file_size"),
        file_type=data.get("file_type"),
        file_url=data.get("file_url"),
    )
