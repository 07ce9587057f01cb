"""Content-addressed blob storage on the local filesystem."""
from __future__ import annotations

import asyncio
import hashlib
import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_REFERENCE = re.compile(r"^sha256:([0-9a-f]{64})$")


class LocalBlobStore:
    """Stores each blob once under ``<root>/<aa>/<digest>``.

    Writes go to a temporary file first and are renamed into place, so a
    reader never sees a partial blob.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    async def put(self, data: bytes, content_type: str) -> str:
        digest = hashlib.sha256(data).hexdigest()
        await asyncio.to_thread(self._write, digest, data)
        return f"sha256:{digest}"

    async def get(self, reference: str) -> bytes:
        return await asyncio.to_thread(self._path_for(reference).read_bytes)

    def _path_for(self, reference: str) -> Path:
        match = _REFERENCE.match(reference)
        if match is None:
            raise KeyError(reference)
        digest = match.group(1)
        return self._root / digest[:2] / digest

    def _write(self, digest: str, data: bytes) -> None:
        target = self._root / digest[:2] / digest
        if target.exists():
            logger.debug("Blob %s already stored", digest)
            return
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(f".{os.getpid()}.tmp")
        tmp.write_bytes(data)
        os.replace(tmp, target)
