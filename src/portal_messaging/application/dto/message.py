from __future__ import annotations

from dataclasses import dataclass

from portal_messaging.application.exceptions import AppError
from portal_messaging.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class FileUpload:
    name: str
    size: int
    content_type: str
    data: bytes = b""

    @classmethod
    def from_bytes(
        cls, name: str, data: bytes, content_type: str = "application/octet-stream",
    ) -> FileUpload:
        return cls(name=name, size=len(data), content_type=content_type, data=data)


@dataclass(frozen=True, slots=True)
class FileSendResult:
    """Outcome of one file in a multi-file upload."""

    file_name: str
    message: Message | None = None
    error: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
