from __future__ import annotations

from typing import Protocol

from portal_messaging.domain.entities.user import User


class UserDirectory(Protocol):
    """Read-only view of portal accounts owned outside the messaging core."""

    async def get_user(self, user_id: str) -> User | None: ...

    async def list_users(self) -> list[User]: ...
