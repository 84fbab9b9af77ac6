"""Messages pushed to realtime subscribers.

Every server message kind is a frozen dataclass carrying a ``message_type``
from :class:`ServerMessageType`. Instances are never mutated after they are
built; the broadcast layer serializes them once per publish.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Union


class ServerMessageType(str, Enum):
    """Kinds of message the server sends over a realtime connection."""

    RSVP_UPDATE = "rsvp_update"
    EVENT_UPDATE = "event_update"
    INVITE_ACCEPTED = "invite_accepted"
    SUBSCRIBED = "subscribed"
    DASHBOARD_SUBSCRIBED = "dashboard_subscribed"
    USER_SUBSCRIBED = "user_subscribed"
    UNSUBSCRIBED = "unsubscribed"
    PONG = "pong"
    ERROR = "error"


@dataclass(frozen=True)
class ActivityEntry:
    """Denormalized activity-log line shown next to a live update."""

    id: str
    type: str
    message: str
    created_at: datetime
    comment: str | None = None


@dataclass(frozen=True)
class RsvpSnapshot:
    id: str
    user_id: str | None
    status: str
    comment: str | None
    name: str


@dataclass(frozen=True)
class RsvpCounts:
    rsvp_count: int
    waitlist_count: int


@dataclass(frozen=True)
class EventSnapshot:
    location: str
    datetime: datetime
    end_datetime: datetime
    min_players: int
    max_players: int
    description: str | None
    allow_sharing: bool


@dataclass(frozen=True)
class RsvpUpdate:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.RSVP_UPDATE

    event_slug: str
    rsvp: RsvpSnapshot
    counts: RsvpCounts
    activities: tuple[ActivityEntry, ...] = ()


@dataclass(frozen=True)
class EventUpdate:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.EVENT_UPDATE

    event_slug: str
    event: EventSnapshot
    activity: ActivityEntry | None = None


@dataclass(frozen=True)
class InviteAccepted:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.INVITE_ACCEPTED

    acceptor_name: str
    acceptor_phone: str
    group_names: tuple[str, ...] = ()
    added_group_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Subscribed:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.SUBSCRIBED

    channel: str
    authenticated: bool


@dataclass(frozen=True)
class DashboardSubscribed:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.DASHBOARD_SUBSCRIBED

    event_slugs: tuple[str, ...]


@dataclass(frozen=True)
class UserSubscribed:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.USER_SUBSCRIBED

    user_id: str


@dataclass(frozen=True)
class Unsubscribed:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.UNSUBSCRIBED

    channel: str


@dataclass(frozen=True)
class Pong:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.PONG


@dataclass(frozen=True)
class ErrorMessage:
    message_type: ClassVar[ServerMessageType] = ServerMessageType.ERROR

    message: str = field(default="Invalid message format")


ServerMessage = Union[
    RsvpUpdate,
    EventUpdate,
    InviteAccepted,
    Subscribed,
    DashboardSubscribed,
    UserSubscribed,
    Unsubscribed,
    Pong,
    ErrorMessage,
]


__all__ = [
    "ActivityEntry",
    "DashboardSubscribed",
    "ErrorMessage",
    "EventSnapshot",
    "EventUpdate",
    "InviteAccepted",
    "Pong",
    "RsvpCounts",
    "RsvpSnapshot",
    "RsvpUpdate",
    "ServerMessage",
    "ServerMessageType",
    "Subscribed",
    "Unsubscribed",
    "UserSubscribed",
]
