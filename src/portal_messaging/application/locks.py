"""Per-key asyncio locks for read-then-write sections."""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID


def conversation_key(conversation_id: UUID) -> str:
    return f"conversation:{conversation_id}"


def direct_pair_key(pair_key: str) -> str:
    return f"direct:{pair_key}"


class KeyedLock:
    """Hands out one ``asyncio.Lock`` per key.

    Locks are created on first use and dropped once nobody holds or waits on
    them, so the registry only grows with the number of keys in flight.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
