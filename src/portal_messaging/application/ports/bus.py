from __future__ import annotations

from typing import Any, Protocol


class EventPublisher(Protocol):
    """Pushes an event to whatever real-time channel the UI listens on.

    ``payload`` may carry an ``event_type`` key naming the event.
    """

    async def publish(self, channel: str, payload: dict[str, Any]) -> None: ...
