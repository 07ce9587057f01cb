from __future__ import annotations

from dataclasses import dataclass

from portal_messaging.domain.value_objects.enums import Role


@dataclass(frozen=True, slots=True)
class User:
    """Portal account as supplied by the user directory."""

    id: str
    name: str
    role: Role
    is_online: bool = False
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
