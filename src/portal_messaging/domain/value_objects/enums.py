from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    ADMIN = "admin"
    CLIENT = "client"


class ConversationType(StrEnum):
    DIRECT = "direct"
    GROUP = "group"


class MessageType(StrEnum):
    TEXT = "text"
    FILE = "file"


class NotificationType(StrEnum):
    MESSAGE = "message"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
