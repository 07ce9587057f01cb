from __future__ import annotations

from enum import StrEnum


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class RejectReason(StrEnum):
    TOO_LARGE = "too_large"


class RejectedError(AppError):
    """An attachment was refused before anything was stored."""

    def __init__(self, detail: str = "", reason: RejectReason = RejectReason.TOO_LARGE) -> None:
        self.reason = reason
        super().__init__(detail)


class AttachmentStoreError(AppError):
    """The blob store failed or timed out; no message was recorded."""
