"""Import all models so Base.metadata knows every table."""
from portal_messaging.infrastructure.db.models.conversation import ConversationModel
from portal_messaging.infrastructure.db.models.message import MessageModel
from portal_messaging.infrastructure.db.models.notification import NotificationModel
from portal_messaging.infrastructure.db.models.participant import ParticipantModel

__all__ = [
    "ConversationModel",
    "MessageModel",
    "NotificationModel",
    "ParticipantModel",
]
