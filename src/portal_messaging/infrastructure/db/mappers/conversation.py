from __future__ import annotations

from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.value_objects.enums import ConversationType
from portal_messaging.infrastructure.db.mappers.message import (
    as_aware,
    entity_to_snapshot,
    snapshot_to_entity,
)
from portal_messaging.infrastructure.db.models.conversation import ConversationModel
from portal_messaging.infrastructure.db.models.participant import ParticipantModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        type=ConversationType(model.type),
        participants=tuple(p.user_id for p in model.participants),
        created_at=as_aware(model.created_at),
        updated_at=as_aware(model.updated_at),
        unread_counts={p.user_id: p.unread_count for p in model.participants},
        last_message=snapshot_to_entity(model.last_message) if model.last_message else None,
        name=model.name,
        description=model.description,
        created_by=model.created_by,
    )


def entity_to_model(entity: Conversation) -> ConversationModel:
    last = entity.last_message
    return ConversationModel(
        id=entity.id,
        type=entity.type.value,
        direct_key=entity.direct_key,
        name=entity.name,
        description=entity.description,
        created_by=entity.created_by,
        last_message=entity_to_snapshot(last) if last else None,
        last_message_at=last.timestamp if last else None,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
        participants=[
            ParticipantModel(
                user_id=user_id,
                position=position,
                unread_count=entity.unread_for(user_id),
            )
            for position, user_id in enumerate(entity.participants)
        ],
    )
