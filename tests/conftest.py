"""Shared test fixtures."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from portal_messaging.application.context import MessagingContext
from portal_messaging.application.ports.clock import ManualClock
from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.entities.user import User
from portal_messaging.domain.value_objects.enums import ConversationType, MessageType, Role
from portal_messaging.infrastructure.directory.static import StaticUserDirectory
from portal_messaging.infrastructure.memory.repositories import InMemoryStore
from portal_messaging.infrastructure.memory.uow import InMemoryUoW, in_memory_uow_factory
from portal_messaging.infrastructure.storage.memory import InMemoryBlobStore
from portal_messaging.services.attachment_handler import AttachmentHandler
from portal_messaging.services.notification_dispatcher import NotificationDispatcher

START = datetime(2024, 1, 20, 14, 0, tzinfo=timezone.utc)

ADMIN_A = User(id="1", name="Alex van der Berg", role=Role.ADMIN, is_online=True)
ADMIN_B = User(id="2", name="Sarah de Jong", role=Role.ADMIN)
ADMIN_C = User(id="4", name="Lisa Bakker", role=Role.ADMIN)
CLIENT_A = User(id="3", name="Mike Visser", role=Role.CLIENT)
CLIENT_B = User(id="5", name="Jan Peters", role=Role.CLIENT, is_online=True)

USERS = (ADMIN_A, ADMIN_B, ADMIN_C, CLIENT_A, CLIENT_B)


class SequentialIds:
    """Deterministic ids: UUID(int=1), UUID(int=2), ..."""

    def __init__(self) -> None:
        self._n = 0

    def new_id(self) -> uuid.UUID:
        self._n += 1
        return uuid.UUID(int=self._n)


def make_ctx(
    store: InMemoryStore | None = None,
    *,
    clock: ManualClock | None = None,
    blobs: InMemoryBlobStore | None = None,
    uow_factory=None,
    users=USERS,
    attachment_timeout: float = 30.0,
    publisher=None,
) -> MessagingContext:
    clock = clock or ManualClock(START)
    ids = SequentialIds()
    dispatcher = NotificationDispatcher(
        uow_factory or in_memory_uow_factory(store or InMemoryStore()),
        clock,
        ids,
        publisher=publisher,
    )
    return MessagingContext(
        users=StaticUserDirectory(users),
        dispatcher=dispatcher,
        attachments=AttachmentHandler(blobs or InMemoryBlobStore(), timeout=attachment_timeout),
        clock=clock,
        ids=ids,
    )


def make_conversation(
    *participants: str,
    type: ConversationType = ConversationType.DIRECT,
    name: str | None = None,
    created_by: str | None = None,
    last_message: Message | None = None,
) -> Conversation:
    return Conversation(
        id=uuid.uuid4(),
        type=type,
        participants=participants,
        created_at=START,
        updated_at=START,
        unread_counts={p: 0 for p in participants},
        last_message=last_message,
        name=name,
        created_by=created_by or participants[0],
    )


def make_message(
    conversation_id: uuid.UUID,
    sender_id: str,
    *,
    content: str = "hello",
    timestamp: datetime = START,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        timestamp=timestamp,
        type=MessageType.TEXT,
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow(store: InMemoryStore) -> InMemoryUoW:
    return InMemoryUoW(store)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(START)


@pytest.fixture
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def ctx(store: InMemoryStore, clock: ManualClock, blobs: InMemoryBlobStore) -> MessagingContext:
    return make_ctx(store, clock=clock, blobs=blobs)
