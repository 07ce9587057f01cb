from __future__ import annotations

import uuid
from typing import Protocol


class IdGenerator(Protocol):
    def new_id(self) -> uuid.UUID: ...


class UuidGenerator:
    """Default random UUID4 implementation."""

    def new_id(self) -> uuid.UUID:
        return uuid.uuid4()
