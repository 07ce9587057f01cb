from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from portal_messaging.domain.value_objects.enums import NotificationType
from portal_messaging.infrastructure.bus.redis_pubsub import RedisPubSubPublisher
from portal_messaging.infrastructure.bus.serializer import deserialize_event, serialize_event


class FakeRedis:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.closed = False

    async def publish(self, channel: str, message: str) -> int:
        self.sent.append((channel, message))
        return 1

    async def aclose(self) -> None:
        self.closed = True


def test_serializer_handles_uuid_datetime_and_enum():
    nid = uuid.uuid4()
    ts = datetime(2024, 1, 20, 16, 10, tzinfo=timezone.utc)

    raw = serialize_event(
        "notification.created",
        {"event_type": "notification.created", "id": nid, "timestamp": ts,
         "type": NotificationType.MESSAGE},
    )
    event, data = deserialize_event(raw)

    assert event == "notification.created"
    assert data == {"id": str(nid), "timestamp": ts.isoformat(), "type": "message"}


@pytest.mark.asyncio
async def test_publisher_wraps_payload():
    redis = FakeRedis()
    publisher = RedisPubSubPublisher(redis)

    await publisher.publish("portal.notifications", {"event_type": "notification.created", "user_id": "3"})
    await publisher.close()

    ((channel, raw),) = redis.sent
    assert channel == "portal.notifications"
    assert deserialize_event(raw) == ("notification.created", {"user_id": "3"})
    assert redis.closed
