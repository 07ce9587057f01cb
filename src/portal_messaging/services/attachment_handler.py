"""Validation and storage of file attachments."""
from __future__ import annotations

import asyncio
import logging

from portal_messaging.application.dto.message import FileUpload
from portal_messaging.application.exceptions import (
    AttachmentStoreError,
    NotFoundError,
    RejectReason,
    RejectedError,
)
from portal_messaging.application.ports.blobs import BlobStore

logger = logging.getLogger(__name__)

MAX_ATTACHMENT_BYTES = 200 * 1024 * 1024

_UNITS = ("Bytes", "KB", "MB", "GB")


def validate(file: FileUpload) -> None:
    if file.size > MAX_ATTACHMENT_BYTES:
        raise RejectedError(
            f"File {file.name} is too large (max 200MB)",
            reason=RejectReason.TOO_LARGE,
        )


def is_previewable(file_type: str | None) -> bool:
    return file_type is not None and file_type.startswith("image/")


def human_readable_size(num_bytes: int) -> str:
    """Format a byte count with 1024-based units, e.g. ``2048576 -> '1.95 MB'``."""
    if num_bytes < 0:
        raise ValueError("size must not be negative")
    if num_bytes == 0:
        return "0 Bytes"

    exponent = 0
    while exponent < len(_UNITS) - 1 and num_bytes >= 1024 ** (exponent + 1):
        exponent += 1
    value = f"{num_bytes / 1024 ** exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_UNITS[exponent]}"


class AttachmentHandler:
    def __init__(self, blobs: BlobStore, *, timeout: float = 30.0) -> None:
        self._blobs = blobs
        self._timeout = timeout

    validate = staticmethod(validate)

    async def store(self, file: FileUpload) -> str:
        """Validate and persist ``file``; returns the blob reference for ``file_url``."""
        validate(file)
        try:
            reference = await asyncio.wait_for(
                self._blobs.put(file.data, file.content_type), timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning("Storing %s timed out after %.1fs", file.name, self._timeout)
            raise AttachmentStoreError(f"Storing {file.name} timed out") from exc
        except OSError as exc:
            logger.exception("Storing %s failed", file.name)
            raise AttachmentStoreError(f"Storing {file.name} failed") from exc
        logger.debug("Stored %s (%s) as %s", file.name, human_readable_size(file.size), reference)
        return reference

    async def open(self, reference: str) -> bytes:
        try:
            return await self._blobs.get(reference)
        except (KeyError, FileNotFoundError) as exc:
            raise NotFoundError("Attachment not found") from exc
