from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from portal_messaging.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from portal_messaging.application.repositories.message import MessageReader, MessageWriter
from portal_messaging.application.repositories.notification import (
    NotificationReader,
    NotificationWriter,
)


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter
    notifications: NotificationReader
    notifications_w: NotificationWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


UnitOfWorkFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
