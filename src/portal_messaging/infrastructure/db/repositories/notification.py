from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal_messaging.domain.entities.notification import Notification
from portal_messaging.infrastructure.db.mappers import notification as mapper
from portal_messaging.infrastructure.db.models.notification import NotificationModel


class NotificationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, notification_id: UUID) -> Notification | None:
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_for_user(self, user_id: str) -> list[Notification]:
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.timestamp.desc(), NotificationModel.seq.desc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count_unread(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(NotificationModel).where(
            NotificationModel.user_id == user_id,
            NotificationModel.read.is_(False),
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


class NotificationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, notification: Notification) -> Notification:
        model = mapper.entity_to_model(notification)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_read(self, notification_id: UUID) -> None:
        stmt = (
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def mark_all_read(self, user_id: str) -> int:
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def delete(self, notification_id: UUID) -> None:
        stmt = (
            delete(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def clear(self, user_id: str) -> int:
        stmt = (
            delete(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
