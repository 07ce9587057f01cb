from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping

from portal_messaging.application.context import MessagingContext
from portal_messaging.application.dto.conversation import ConversationSummary
from portal_messaging.application.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from portal_messaging.application.locks import conversation_key, direct_pair_key
from portal_messaging.application.policies.permissions import (
    assert_admin,
    assert_can_delete,
    assert_conversation_access,
)
from portal_messaging.application.policies.visibility import filter_visible, order_by_recent
from portal_messaging.application.uow import UnitOfWork
from portal_messaging.domain.entities.conversation import Conversation, direct_key
from portal_messaging.domain.entities.user import User
from portal_messaging.domain.value_objects.enums import ConversationType, Role

logger = logging.getLogger(__name__)


async def create_direct_conversation(
    user_a: str,
    user_b: str,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> Conversation:
    """Return the direct conversation between two users, creating it if needed.

    Argument order does not matter; concurrent calls for the same pair are
    serialised so only one record is ever created.
    """
    if user_a == user_b:
        raise ValidationError("A direct conversation needs two different users")
    await _require_users([user_a, user_b], ctx)

    pair = direct_key(user_a, user_b)
    async with ctx.locks.hold(direct_pair_key(pair)):
        existing = await uow.conversations.get_direct(user_a, user_b)
        if existing is not None:
            logger.debug("Direct conversation %s already exists for %s", existing.id, pair)
            return existing

        now = ctx.clock.now()
        conversation = Conversation(
            id=ctx.ids.new_id(),
            type=ConversationType.DIRECT,
            participants=(user_a, user_b),
            created_at=now,
            updated_at=now,
            unread_counts={user_a: 0, user_b: 0},
            created_by=user_a,
        )
        try:
            conversation = await uow.conversations_w.create(conversation)
            await uow.commit()
        except ConflictError:
            # another process won the insert; the repository already rolled back
            existing = await uow.conversations.get_direct(user_a, user_b)
            if existing is None:
                raise
            logger.debug("Direct conversation %s created concurrently for %s", existing.id, pair)
            return existing

    logger.info("Direct conversation %s created for %s", conversation.id, pair)
    return conversation


async def create_group_conversation(
    creator: str,
    name: str,
    description: str | None,
    member_ids: Iterable[str],
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> Conversation:
    """Create a named group; the creator is always the first participant."""
    members = list(member_ids)
    if not name or not name.strip():
        raise ValidationError("Group name is required")
    if not members:
        raise ValidationError("Select at least one member")

    creator_user = await _require_users([creator], ctx)
    assert_admin(creator_user[0])

    participants = tuple(dict.fromkeys([creator, *members]))
    if len(participants) < 2:
        raise ValidationError("A group needs at least one member besides the creator")
    await _require_users(participants[1:], ctx)

    now = ctx.clock.now()
    conversation = Conversation(
        id=ctx.ids.new_id(),
        type=ConversationType.GROUP,
        participants=participants,
        created_at=now,
        updated_at=now,
        unread_counts={p: 0 for p in participants},
        name=name.strip(),
        description=description or None,
        created_by=creator,
    )
    conversation = await uow.conversations_w.create(conversation)
    await uow.commit()
    logger.info(
        "Group %r (%s) created by %s with %d participants",
        conversation.name, conversation.id, creator, len(participants),
    )
    return conversation


async def list_conversations(
    user_id: str,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> list[ConversationSummary]:
    """Visible conversations for ``user_id``, most recently active first."""
    (user,) = await _require_users([user_id], ctx)
    return await list_conversations_for_role(user.id, user.role, uow, ctx)


async def list_conversations_for_role(
    user_id: str,
    role: Role,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> list[ConversationSummary]:
    users = {u.id: u for u in await ctx.users.list_users()}
    candidates = await uow.conversations.list_for_participant(user_id)
    visible = order_by_recent(filter_visible(candidates, user_id, role, users))
    return [summarize(c, user_id, users) for c in visible]


def summarize(
    conversation: Conversation,
    viewer_id: str,
    users: Mapping[str, User],
) -> ConversationSummary:
    if conversation.is_group:
        return ConversationSummary(
            conversation=conversation,
            title=conversation.name or "Group chat",
            subtitle=f"{len(conversation.participants)} members",
            unread_count=conversation.unread_for(viewer_id),
            last_message=conversation.last_message,
        )

    other_id = conversation.other_participant(viewer_id)
    other = users.get(other_id) if other_id is not None else None
    return ConversationSummary(
        conversation=conversation,
        title=other.name if other else "Unknown",
        subtitle="Team" if other is not None and other.is_admin else "Client",
        unread_count=conversation.unread_for(viewer_id),
        last_message=conversation.last_message,
        other_participant=other,
    )


async def get_conversation(
    conversation_id: uuid.UUID,
    user_id: str,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    return assert_conversation_access(conversation, user_id)


async def mark_conversation_read(
    conversation_id: uuid.UUID,
    user_id: str,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> int:
    """Acknowledge everything received in a conversation. Returns messages flipped to read."""
    async with ctx.locks.hold(conversation_key(conversation_id)):
        conversation = await uow.conversations.get_by_id(conversation_id)
        assert_conversation_access(conversation, user_id)
        changed = await uow.messages_w.mark_read(conversation_id, user_id)
        await uow.conversations_w.reset_unread(conversation_id, user_id)
        await uow.commit()
    return changed


async def delete_conversation(
    conversation_id: uuid.UUID,
    user_id: str,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> None:
    """Remove a conversation and all of its messages (admins or the creator only)."""
    (user,) = await _require_users([user_id], ctx)
    async with ctx.locks.hold(conversation_key(conversation_id)):
        conversation = await uow.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        assert_can_delete(conversation, user)

        removed = await uow.messages_w.delete_by_conversation(conversation_id)
        await uow.conversations_w.delete(conversation_id)
        await uow.commit()
    logger.info(
        "Conversation %s deleted by %s (%d messages)", conversation_id, user_id, removed,
    )


async def list_available_contacts(
    user_id: str,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> list[User]:
    """Users ``user_id`` could start a new direct conversation with.

    Admins may write to anyone, clients only to admins; users already sharing
    a direct conversation with the requester are left out.
    """
    (me,) = await _require_users([user_id], ctx)
    existing = {
        c.other_participant(user_id)
        for c in await uow.conversations.list_for_participant(user_id)
        if c.type == ConversationType.DIRECT
    }
    return [
        u
        for u in await ctx.users.list_users()
        if u.id != me.id and (me.is_admin or u.is_admin) and u.id not in existing
    ]


async def _require_users(user_ids: Iterable[str], ctx: MessagingContext) -> list[User]:
    users: list[User] = []
    for user_id in user_ids:
        user = await ctx.users.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        users.append(user)
    return users
