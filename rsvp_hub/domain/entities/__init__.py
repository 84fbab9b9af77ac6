"""Domain entities exposed by the application."""

from .event import Event
from .inbound_sms import InboundSms
from .notification import (
    OUTSTANDING_STATUSES,
    PROCESSED_STATUSES,
    Notification,
    NotificationKind,
    NotificationStatus,
    ScheduleType,
    aggregate_status,
)
from .realtime import (
    ActivityEntry,
    DashboardSubscribed,
    ErrorMessage,
    EventSnapshot,
    EventUpdate,
    InviteAccepted,
    Pong,
    RsvpCounts,
    RsvpSnapshot,
    RsvpUpdate,
    ServerMessage,
    ServerMessageType,
    Subscribed,
    Unsubscribed,
    UserSubscribed,
)
from .rsvp import GUEST_FALLBACK_NAME, Recipient, Rsvp, RsvpStatus
from .sent_message import SentMessage, SentMessageStatus
from .user import User

__all__ = [
    "ActivityEntry",
    "DashboardSubscribed",
    "ErrorMessage",
    "Event",
    "EventSnapshot",
    "EventUpdate",
    "GUEST_FALLBACK_NAME",
    "InboundSms",
    "InviteAccepted",
    "Notification",
    "NotificationKind",
    "NotificationStatus",
    "OUTSTANDING_STATUSES",
    "PROCESSED_STATUSES",
    "Pong",
    "Recipient",
    "Rsvp",
    "RsvpCounts",
    "RsvpSnapshot",
    "RsvpStatus",
    "RsvpUpdate",
    "ScheduleType",
    "SentMessage",
    "SentMessageStatus",
    "ServerMessage",
    "ServerMessageType",
    "Subscribed",
    "Unsubscribed",
    "User",
    "UserSubscribed",
    "aggregate_status",
]
