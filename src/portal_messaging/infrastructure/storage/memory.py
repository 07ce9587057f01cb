from __future__ import annotations

import hashlib


class InMemoryBlobStore:
    """Content-addressed blobs kept in a dict."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}

    async def put(self, data: bytes, content_type: str) -> str:
        reference = f"sha256:{hashlib.sha256(data).hexdigest()}"
        self._blobs[reference] = data
        self.content_types[reference] = content_type
        return reference

    async def get(self, reference: str) -> bytes:
        return self._blobs[reference]

    def __contains__(self, reference: object) -> bool:
        return reference in self._blobs
