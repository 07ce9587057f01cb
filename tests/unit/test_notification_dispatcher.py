from __future__ import annotations

from contextlib import asynccontextmanager

import pytest

from portal_messaging.infrastructure.memory.uow import InMemoryUoW
from portal_messaging.services import conversation_service, message_service, notification_service
from portal_messaging.services.notification_dispatcher import (
    NEW_MESSAGE_TITLE,
    notification_payload,
    preview,
)
from tests.conftest import ADMIN_A, make_conversation, make_ctx, make_message


class _FlakyNotifications:
    def __init__(self, inner, failing_user: str) -> None:
        self._inner = inner
        self._failing_user = failing_user

    async def add(self, notification):
        if notification.user_id == self._failing_user:
            raise ConnectionError("notification store unavailable")
        return await self._inner.add(notification)


def _flaky_factory(store, failing_user: str):
    @asynccontextmanager
    async def factory():
        uow = InMemoryUoW(store)
        uow.notifications_w = _FlakyNotifications(uow.notifications_w, failing_user)
        yield uow

    return factory


class _RecordingPublisher:
    def __init__(self) -> None:
        self.published: list[tuple[str, dict]] = []

    async def publish(self, channel: str, payload: dict) -> None:
        self.published.append((channel, payload))


def test_preview_truncates_long_content():
    assert preview("short") == "short"
    assert preview("x" * 50) == "x" * 50
    assert preview("x" * 51) == "x" * 50 + "…"


@pytest.mark.asyncio
async def test_group_message_fans_out_to_every_other_participant(uow, ctx, store):
    conv = await conversation_service.create_group_conversation(
        "1", "Team", None, ["2", "4"], uow, ctx,
    )

    await message_service.send_message(conv.id, "1", "hello team", uow, ctx)
    await ctx.dispatcher.drain()

    recipients = sorted(n.user_id for n in store.notifications.values())
    assert recipients == ["2", "4"]
    assert ctx.dispatcher.delivered == 2
    for n in store.notifications.values():
        assert n.title == NEW_MESSAGE_TITLE
        assert n.message == 'Alex van der Berg sent you a message: "hello team"'
        assert n.read is False


@pytest.mark.asyncio
async def test_recipients_read_state_is_independent(uow, ctx):
    conv = await conversation_service.create_group_conversation(
        "1", "Team", None, ["2", "4"], uow, ctx,
    )
    await message_service.send_message(conv.id, "1", "hello", uow, ctx)
    await ctx.dispatcher.drain()

    (for_b,) = await notification_service.list_notifications("2", uow)
    await notification_service.mark_notification_read(for_b.id, "2", uow)

    assert await notification_service.unread_notification_count("2", uow) == 0
    assert await notification_service.unread_notification_count("4", uow) == 1


@pytest.mark.asyncio
async def test_failed_delivery_does_not_affect_others(uow, store):
    ctx = make_ctx(store, uow_factory=_flaky_factory(store, failing_user="2"))
    conv = await conversation_service.create_group_conversation(
        "1", "Team", None, ["2", "4"], uow, ctx,
    )

    msg = await message_service.send_message(conv.id, "1", "hello", uow, ctx)
    await ctx.dispatcher.drain()

    assert store.messages[msg.id] == msg
    assert [n.user_id for n in store.notifications.values()] == ["4"]
    assert ctx.dispatcher.failed_deliveries == 1
    assert ctx.dispatcher.delivered == 1
    assert ctx.dispatcher.in_flight == 0


@pytest.mark.asyncio
async def test_long_content_preview_in_notification(uow, ctx, store):
    conv = await conversation_service.create_direct_conversation("1", "3", uow, ctx)
    content = "a" * 60

    await message_service.send_message(conv.id, "3", content, uow, ctx)
    await ctx.dispatcher.drain()

    (n,) = store.notifications.values()
    assert n.message == f'Mike Visser sent you a message: "{"a" * 50}…"'


@pytest.mark.asyncio
async def test_delivered_notifications_are_published(uow, store):
    publisher = _RecordingPublisher()
    ctx = make_ctx(store, publisher=publisher)
    conv = await conversation_service.create_direct_conversation("1", "3", uow, ctx)

    await message_service.send_message(conv.id, "1", "hi", uow, ctx)
    await ctx.dispatcher.drain()

    ((channel, payload),) = publisher.published
    assert channel == "portal.notifications"
    assert payload["event_type"] == "notification.created"
    assert payload["user_id"] == "3"


def test_notification_payload_is_json_ready(ctx):
    conv = make_conversation("1", "3")
    (n,) = ctx.dispatcher.build(make_message(conv.id, "1", content="hey"), conv, ADMIN_A)
    payload = notification_payload(n)

    assert payload["type"] == "message"
    assert payload["action_data"] == {"conversation_id": str(conv.id)}
    assert isinstance(payload["timestamp"], str)
