from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal_messaging.application.exceptions import ConflictError
from portal_messaging.domain.entities.conversation import Conversation, direct_key
from portal_messaging.domain.entities.message import Message
from portal_messaging.infrastructure.db.mappers import conversation as mapper
from portal_messaging.infrastructure.db.mappers.message import entity_to_snapshot
from portal_messaging.infrastructure.db.models.conversation import ConversationModel
from portal_messaging.infrastructure.db.models.participant import ParticipantModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        result = await self._session.get(
            ConversationModel, conversation_id, populate_existing=True,
        )
        return mapper.model_to_entity(result) if result else None

    async def get_direct(self, user_a: str, user_b: str) -> Conversation | None:
        stmt = (
            select(ConversationModel)
            .where(ConversationModel.direct_key == direct_key(user_a, user_b))
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_for_participant(self, user_id: str) -> list[Conversation]:
        stmt = (
            select(ConversationModel)
            .join(
                ParticipantModel,
                ParticipantModel.conversation_id == ConversationModel.id,
            )
            .where(ParticipantModel.user_id == user_id)
            .order_by(ConversationModel.created_at.asc(), ConversationModel.id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, conversation: Conversation) -> Conversation:
        model = mapper.entity_to_model(conversation)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError("Direct conversation already exists") from exc
        return mapper.model_to_entity(model)

    async def record_last_message(self, conversation_id: UUID, message: Message) -> None:
        stmt = (
            update(ConversationModel)
            .where(
                ConversationModel.id == conversation_id,
                or_(
                    ConversationModel.last_message_at.is_(None),
                    ConversationModel.last_message_at <= message.timestamp,
                ),
            )
            .values(
                last_message=entity_to_snapshot(message),
                last_message_at=message.timestamp,
                updated_at=message.timestamp,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def increment_unread(self, conversation_id: UUID, user_ids: Iterable[str]) -> None:
        ids = list(user_ids)
        if not ids:
            return
        stmt = (
            update(ParticipantModel)
            .where(
                ParticipantModel.conversation_id == conversation_id,
                ParticipantModel.user_id.in_(ids),
            )
            .values(unread_count=ParticipantModel.unread_count + 1)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def reset_unread(self, conversation_id: UUID, user_id: str) -> None:
        stmt = (
            update(ParticipantModel)
            .where(
                ParticipantModel.conversation_id == conversation_id,
                ParticipantModel.user_id == user_id,
            )
            .values(unread_count=0)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def delete(self, conversation_id: UUID) -> None:
        await self._session.execute(
            delete(ParticipantModel)
            .where(ParticipantModel.conversation_id == conversation_id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            delete(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .execution_options(synchronize_session=False)
        )
