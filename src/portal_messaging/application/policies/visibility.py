"""Which conversations a user may list, and in what order."""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.entities.user import User
from portal_messaging.domain.value_objects.enums import Role


def is_visible(
    conversation: Conversation,
    viewer_id: str,
    viewer_role: Role,
    users: Mapping[str, User],
) -> bool:
    if not conversation.has_participant(viewer_id):
        return False

    if conversation.is_group:
        return viewer_role == Role.ADMIN

    if viewer_role == Role.ADMIN:
        return True

    # Clients only ever see threads with staff, even if the data says otherwise.
    other_id = conversation.other_participant(viewer_id)
    other = users.get(other_id) if other_id is not None else None
    return other is not None and other.role == Role.ADMIN


def filter_visible(
    conversations: Iterable[Conversation],
    viewer_id: str,
    viewer_role: Role,
    users: Mapping[str, User],
) -> list[Conversation]:
    return [c for c in conversations if is_visible(c, viewer_id, viewer_role, users)]


def order_by_recent(conversations: Iterable[Conversation]) -> list[Conversation]:
    """Most recent last message first; conversations without messages last.

    Both groups keep their input order for ties.
    """
    active: list[Conversation] = []
    idle: list[Conversation] = []
    for conversation in conversations:
        (active if conversation.last_message is not None else idle).append(conversation)
    active.sort(key=lambda c: c.last_message.timestamp, reverse=True)  # type: ignore[union-attr]
    return active + idle
