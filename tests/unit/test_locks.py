from __future__ import annotations

import asyncio

import pytest

from portal_messaging.application.locks import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_serialised():
    locks = KeyedLock()
    events: list[str] = []

    async def worker(name: str) -> None:
        async with locks.hold("conversation:1"):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert events == ["a-in", "a-out", "b-in", "b-out"]


@pytest.mark.asyncio
async def test_different_keys_run_concurrently():
    locks = KeyedLock()
    inside = asyncio.Event()

    async def first() -> None:
        async with locks.hold("conversation:1"):
            await asyncio.wait_for(inside.wait(), timeout=1)

    async def second() -> None:
        async with locks.hold("conversation:2"):
            inside.set()

    await asyncio.gather(first(), second())


@pytest.mark.asyncio
async def test_locks_are_released_after_use():
    locks = KeyedLock()

    async with locks.hold("direct:1:3"):
        assert len(locks) == 1

    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_released_on_error():
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        async with locks.hold("k"):
            raise RuntimeError("boom")

    async with locks.hold("k"):
        pass
    assert len(locks) == 0
