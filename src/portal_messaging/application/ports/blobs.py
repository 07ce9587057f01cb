from __future__ import annotations

from typing import Protocol


class BlobStore(Protocol):
    async def put(self, data: bytes, content_type: str) -> str:
        """Persist ``data`` and return an opaque reference to it."""
        ...

    async def get(self, reference: str) -> bytes: ...
