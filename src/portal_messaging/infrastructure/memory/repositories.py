"""Dict-backed repositories sharing one ``InMemoryStore``."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

from portal_messaging.domain.entities.conversation import Conversation, direct_key
from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.entities.notification import Notification
from portal_messaging.domain.value_objects.enums import ConversationType


@dataclass
class InMemoryStore:
    conversations: dict[UUID, Conversation] = field(default_factory=dict)
    messages: dict[UUID, Message] = field(default_factory=dict)
    notifications: dict[UUID, Notification] = field(default_factory=dict)


class ConversationReaderRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return self._store.conversations.get(conversation_id)

    async def get_direct(self, user_a: str, user_b: str) -> Conversation | None:
        key = direct_key(user_a, user_b)
        for conversation in self._store.conversations.values():
            if conversation.type == ConversationType.DIRECT and conversation.direct_key == key:
                return conversation
        return None

    async def list_for_participant(self, user_id: str) -> list[Conversation]:
        return [c for c in self._store.conversations.values() if c.has_participant(user_id)]


class ConversationWriterRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def create(self, conversation: Conversation) -> Conversation:
        self._store.conversations[conversation.id] = conversation
        return conversation

    async def record_last_message(self, conversation_id: UUID, message: Message) -> None:
        conversation = self._store.conversations.get(conversation_id)
        if conversation is None:
            return
        current = conversation.last_message
        if current is not None and current.timestamp > message.timestamp:
            return
        self._store.conversations[conversation_id] = replace(
            conversation,
            last_message=message,
            updated_at=max(conversation.updated_at, message.timestamp),
        )

    async def increment_unread(self, conversation_id: UUID, user_ids: Iterable[str]) -> None:
        conversation = self._store.conversations.get(conversation_id)
        if conversation is None:
            return
        counts = dict(conversation.unread_counts)
        for user_id in user_ids:
            counts[user_id] = counts.get(user_id, 0) + 1
        self._store.conversations[conversation_id] = replace(conversation, unread_counts=counts)

    async def reset_unread(self, conversation_id: UUID, user_id: str) -> None:
        conversation = self._store.conversations.get(conversation_id)
        if conversation is None:
            return
        counts = dict(conversation.unread_counts)
        counts[user_id] = 0
        self._store.conversations[conversation_id] = replace(conversation, unread_counts=counts)

    async def delete(self, conversation_id: UUID) -> None:
        self._store.conversations.pop(conversation_id, None)


class MessageReaderRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def get_by_id(self, message_id: UUID) -> Message | None:
        return self._store.messages.get(message_id)

    async def list_by_conversation(self, conversation_id: UUID) -> list[Message]:
        # sorted() is stable, so equal timestamps keep insertion order
        return sorted(
            (m for m in self._store.messages.values() if m.conversation_id == conversation_id),
            key=lambda m: m.timestamp,
        )


class MessageWriterRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def append(self, message: Message) -> Message:
        if message.id is None:
            message = replace(message, id=uuid4())
        self._store.messages[message.id] = message
        return message

    async def delete(self, message_id: UUID) -> None:
        self._store.messages.pop(message_id, None)

    async def delete_by_conversation(self, conversation_id: UUID) -> int:
        doomed = [m.id for m in self._store.messages.values() if m.conversation_id == conversation_id]
        for message_id in doomed:
            del self._store.messages[message_id]
        return len(doomed)

    async def mark_read(self, conversation_id: UUID, reader_id: str) -> int:
        changed = 0
        for message_id, message in self._store.messages.items():
            if (
                message.conversation_id == conversation_id
                and message.sender_id != reader_id
                and not message.read
            ):
                self._store.messages[message_id] = replace(message, read=True)
                changed += 1
        return changed


class NotificationReaderRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def get_by_id(self, notification_id: UUID) -> Notification | None:
        return self._store.notifications.get(notification_id)

    async def list_for_user(self, user_id: str) -> list[Notification]:
        # newest insertion first for equal timestamps
        mine = [n for n in reversed(self._store.notifications.values()) if n.user_id == user_id]
        return sorted(mine, key=lambda n: n.timestamp, reverse=True)

    async def count_unread(self, user_id: str) -> int:
        return sum(
            1 for n in self._store.notifications.values() if n.user_id == user_id and not n.read
        )


class NotificationWriterRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def add(self, notification: Notification) -> Notification:
        self._store.notifications[notification.id] = notification
        return notification

    async def mark_read(self, notification_id: UUID) -> None:
        notification = self._store.notifications.get(notification_id)
        if notification is not None:
            self._store.notifications[notification_id] = replace(notification, read=True)

    async def mark_all_read(self, user_id: str) -> int:
        changed = 0
        for notification_id, notification in self._store.notifications.items():
            if notification.user_id == user_id and not notification.read:
                self._store.notifications[notification_id] = replace(notification, read=True)
                changed += 1
        return changed

    async def delete(self, notification_id: UUID) -> None:
        self._store.notifications.pop(notification_id, None)

    async def clear(self, user_id: str) -> int:
        doomed = [n.id for n in self._store.notifications.values() if n.user_id == user_id]
        for notification_id in doomed:
            del self._store.notifications[notification_id]
        return len(doomed)
