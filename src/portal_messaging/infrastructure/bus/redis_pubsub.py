"""Redis Pub/Sub publish side for real-time notification fan-out."""
from __future__ import annotations

import logging
from typing import Any

import redis.asyncio as aioredis

from portal_messaging.infrastructure.bus.serializer import serialize_event

logger = logging.getLogger(__name__)


class RedisPubSubPublisher:
    """Implements application.ports.bus.EventPublisher."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    @classmethod
    def from_url(cls, url: str) -> RedisPubSubPublisher:
        return cls(aioredis.from_url(url, decode_responses=True))

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        raw = serialize_event(payload.get("event_type", "unknown"), payload)
        receivers = await self._redis.publish(channel, raw)
        logger.debug("Published to %s (%s receivers)", channel, receivers)

    async def close(self) -> None:
        await self._redis.aclose()
