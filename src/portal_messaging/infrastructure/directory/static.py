"""User directory backed by a fixed list, optionally loaded from JSON."""
from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from portal_messaging.domain.entities.user import User
from portal_messaging.domain.value_objects.enums import Role


class StaticUserDirectory:
    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: dict[str, User] = {u.id: u for u in users}

    async def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def list_users(self) -> list[User]:
        return list(self._users.values())

    @classmethod
    def from_json(cls, path: str | Path) -> StaticUserDirectory:
        """Load ``[{"id", "name", "role", "is_online"?, "email"?}, ...]``."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(
            User(
                id=str(item["id"]),
                name=item["name"],
                role=Role(item["role"]),
                is_online=bool(item.get("is_online", False)),
                email=item.get("email"),
            )
            for item in raw
        )
