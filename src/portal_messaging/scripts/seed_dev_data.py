"""Seed development data: the portal's demo users, conversations and messages."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from portal_messaging.application.context import MessagingContext
from portal_messaging.application.uow import UnitOfWorkFactory
from portal_messaging.domain.entities.conversation import Conversation
from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.entities.user import User
from portal_messaging.domain.value_objects.enums import ConversationType, MessageType, Role

logger = logging.getLogger(__name__)

DEMO_USERS: tuple[User, ...] = (
    User(id="1", name="Alex van der Berg", role=Role.ADMIN, is_online=True, email="alex@gkm.nl"),
    User(id="2", name="Sarah de Jong", role=Role.ADMIN, is_online=True, email="sarah@gkm.nl"),
    User(id="3", name="Mike Visser", role=Role.CLIENT, is_online=False, email="mike@bakkerij.nl"),
    User(id="4", name="Lisa Bakker", role=Role.ADMIN, is_online=False, email="lisa@gkm.nl"),
    User(id="5", name="Jan Peters", role=Role.CLIENT, is_online=True, email="jan@restaurant.nl"),
    User(id="6", name="Emma de Vries", role=Role.CLIENT, is_online=False, email="emma@boutique.nl"),
    User(id="7", name="Tom Hendriks", role=Role.CLIENT, is_online=True, email="tom@cafe.nl"),
    User(id="8", name="Sophie Jansen", role=Role.CLIENT, is_online=False, email="sophie@salon.nl"),
)

# (key, participants, name, description, created_by, created_at)
_CONVERSATIONS = [
    ("conv-1", ("1", "3"), None, None, "1", "2024-01-15T09:00:00"),
    ("conv-2", ("1", "5"), None, None, "1", "2024-01-15T09:00:00"),
    ("conv-3", ("1", "2"), None, None, "1", "2024-01-15T09:00:00"),
    ("conv-4", ("1", "6"), None, None, "1", "2024-01-15T09:00:00"),
    ("conv-5", ("2", "7"), None, None, "2", "2024-01-15T09:00:00"),
    ("conv-6", ("4", "8"), None, None, "4", "2024-01-15T09:00:00"),
    ("group-1", ("1", "2", "4"), "Team GKM", "General team discussions", "1", "2024-01-15T10:00:00"),
    ("group-2", ("1", "2", "4"), "Project Updates", "Daily project status and updates", "2",
     "2024-01-18T09:00:00"),
]

# (conversation key, sender, content, timestamp, read)
_MESSAGES = [
    ("conv-1", "3", "Hi Alex, ik heb feedback op de nieuwe Instagram posts.",
     "2024-01-20T14:30:00", False),
    ("conv-1", "1", "Perfect! Stuur ze maar door, dan kijk ik er direct naar.",
     "2024-01-20T14:32:00", True),
    ("conv-1", "3", "De kleuren zien er goed uit, maar kunnen we de tekst wat groter maken?",
     "2024-01-20T14:35:00", False),
    ("conv-2", "5", "Hoi Alex, wanneer gaan de Facebook ads live?", "2024-01-20T15:00:00", False),
    ("group-1", "2", "Team, laten we de nieuwe campagne bespreken!", "2024-01-20T16:00:00", False),
    ("group-1", "4", "Goed idee Sarah! Ik heb wat nieuwe concepten klaar.",
     "2024-01-20T16:05:00", False),
    ("group-1", "1", "Perfect! Kunnen we morgen een meeting plannen?", "2024-01-20T16:10:00", True),
    ("conv-4", "6", "Hallo Alex, kunnen we de social media strategie voor volgend kwartaal bespreken?",
     "2024-01-19T10:30:00", False),
    ("conv-5", "7", "Sarah, de laatste Instagram posts hebben geweldige engagement! Dank je wel.",
     "2024-01-19T14:15:00", False),
    ("conv-6", "8", "Lisa, ik heb wat nieuwe foto's van de salon. Kunnen we ze gebruiken voor Facebook?",
     "2024-01-18T11:45:00", True),
]


def _ts(raw: str) -> datetime:
    return datetime.fromisoformat(raw).replace(tzinfo=timezone.utc)


async def seed(uow_factory: UnitOfWorkFactory, ctx: MessagingContext) -> dict[str, Conversation]:
    """Write the demo conversations and messages; returns conversations by seed key.

    Messages go straight to the repositories so their historical timestamps
    and read flags are kept and no notifications are sent.
    """
    created: dict[str, Conversation] = {}
    async with uow_factory() as uow:
        for key, participants, name, description, created_by, created_at in _CONVERSATIONS:
            ts = _ts(created_at)
            conv = Conversation(
                id=ctx.ids.new_id(),
                type=ConversationType.GROUP if name else ConversationType.DIRECT,
                participants=participants,
                created_at=ts,
                updated_at=ts,
                unread_counts={p: 0 for p in participants},
                name=name,
                description=description,
                created_by=created_by,
            )
            created[key] = await uow.conversations_w.create(conv)

        for key, sender_id, content, timestamp, read in _MESSAGES:
            conv = created[key]
            msg = await uow.messages_w.append(
                Message(
                    id=ctx.ids.new_id(),
                    conversation_id=conv.id,
                    sender_id=sender_id,
                    content=content,
                    timestamp=_ts(timestamp),
                    read=read,
                    type=MessageType.TEXT,
                )
            )
            await uow.conversations_w.record_last_message(conv.id, msg)
            if not read:
                recipients = [p for p in conv.participants if p != sender_id]
                await uow.conversations_w.increment_unread(conv.id, recipients)

        await uow.commit()

    logger.info("Seeded %d conversations and %d messages", len(created), len(_MESSAGES))
    return created


async def _main() -> None:
    from portal_messaging.app import build_context
    from portal_messaging.config import settings
    from portal_messaging.infrastructure.db.session import (
        create_engine,
        create_sessionmaker,
        create_tables,
    )
    from portal_messaging.infrastructure.db.uow import sqlalchemy_uow_factory

    engine = create_engine(settings)
    await create_tables(engine)
    uow_factory = sqlalchemy_uow_factory(create_sessionmaker(engine))
    await seed(uow_factory, build_context(settings, uow_factory))
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main())
