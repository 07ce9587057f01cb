from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.value_objects.enums import ConversationType


def direct_key(user_a: str, user_b: str) -> str:
    """Order-independent key identifying the direct conversation of a pair."""
    first, second = sorted((user_a, user_b))
    return f"{first}:{second}"


@dataclass(frozen=True, slots=True)
class Conversation:
    id: UUID
    type: ConversationType
    participants: tuple[str, ...]
    created_at: datetime
    updated_at: datetime
    unread_counts: Mapping[str, int] = field(default_factory=dict)
    last_message: Message | None = None
    name: str | None = None
    description: str | None = None
    created_by: str | None = None

    @property
    def is_group(self) -> bool:
        return self.type == ConversationType.GROUP

    @property
    def unread_count(self) -> int:
        """Aggregate over all participants."""
        return sum(self.unread_counts.values())

    @property
    def direct_key(self) -> str | None:
        if self.type != ConversationType.DIRECT or len(self.participants) != 2:
            return None
        return direct_key(*self.participants)

    def unread_for(self, user_id: str) -> int:
        return self.unread_counts.get(user_id, 0)

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: str) -> str | None:
        """First participant that is not ``user_id``."""
        for participant in self.participants:
            if participant != user_id:
                return participant
        return None
