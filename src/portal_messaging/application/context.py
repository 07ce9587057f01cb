from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from portal_messaging.application.locks import KeyedLock
from portal_messaging.application.ports.clock import Clock
from portal_messaging.application.ports.ids import IdGenerator
from portal_messaging.application.ports.users import UserDirectory

if TYPE_CHECKING:
    from portal_messaging.services.attachment_handler import AttachmentHandler
    from portal_messaging.services.notification_dispatcher import NotificationDispatcher


@dataclass(slots=True)
class MessagingContext:
    """Long-lived collaborators shared by every request.

    Unlike the unit of work, one context lives for the whole process so that
    its locks actually serialise concurrent requests.
    """

    users: UserDirectory
    dispatcher: NotificationDispatcher
    attachments: AttachmentHandler
    clock: Clock
    ids: IdGenerator
    locks: KeyedLock = field(default_factory=KeyedLock)
