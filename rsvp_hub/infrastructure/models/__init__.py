"""ORM models used by the application infrastructure."""

from .event import EventModel
from .inbound_sms import InboundSmsModel
from .notification import NotificationModel, SentMessageModel
from .rsvp import RsvpModel
from .user import UserModel

__all__ = [
    "EventModel",
    "InboundSmsModel",
    "NotificationModel",
    "RsvpModel",
    "SentMessageModel",
    "UserModel",
]
