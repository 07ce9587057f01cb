from __future__ import annotations

from contextlib import asynccontextmanager
from types import TracebackType
from typing import AsyncIterator, Self

from portal_messaging.application.uow import UnitOfWorkFactory
from portal_messaging.infrastructure.memory.repositories import (
    ConversationReaderRepo,
    ConversationWriterRepo,
    InMemoryStore,
    MessageReaderRepo,
    MessageWriterRepo,
    NotificationReaderRepo,
    NotificationWriterRepo,
)


class InMemoryUoW:
    """Unit-of-Work over an ``InMemoryStore``.

    Writes land in the store immediately; ``commit`` only counts calls.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.conversations = ConversationReaderRepo(store)
        self.conversations_w = ConversationWriterRepo(store)
        self.messages = MessageReaderRepo(store)
        self.messages_w = MessageWriterRepo(store)
        self.notifications = NotificationReaderRepo(store)
        self.notifications_w = NotificationWriterRepo(store)
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


def in_memory_uow_factory(store: InMemoryStore) -> UnitOfWorkFactory:
    @asynccontextmanager
    async def factory() -> AsyncIterator[InMemoryUoW]:
        async with InMemoryUoW(store) as uow:
            yield uow

    return factory
