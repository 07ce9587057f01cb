from __future__ import annotations

from pydantic import BaseModel

from portal_messaging.domain.value_objects.enums import Role


class UserResponse(BaseModel):
    id: str
    name: str
    role: Role
    is_online: bool
    email: str | None = None

    model_config = {"from_attributes": True}
