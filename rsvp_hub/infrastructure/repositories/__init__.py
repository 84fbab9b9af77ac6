"""Repository implementations for infrastructure layer."""

from .event_repository import EventRepository
from .inbound_sms_repository import InboundSmsRepository
from .notification_repository import NotificationRepository
from .rsvp_repository import RsvpRepository
from .sent_message_repository import SentMessageRepository
from .user_repository import UserRepository

__all__ = [
    "EventRepository",
    "InboundSmsRepository",
    "NotificationRepository",
    "RsvpRepository",
    "SentMessageRepository",
    "UserRepository",
]
