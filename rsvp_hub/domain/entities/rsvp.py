"""Domain entities describing RSVP responses and reminder recipients."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

GUEST_FALLBACK_NAME = "Guest"


class RsvpStatus(str, Enum):
    """Response given by an attendee."""

    IN = "IN"
    OUT = "OUT"
    MAYBE = "MAYBE"
    WAITLIST = "WAITLIST"
    CONDITIONAL = "CONDITIONAL"


@dataclass
class Rsvp:
    """A response to an event, either from a registered user or a guest."""

    id: int | None
    event_id: int
    status: RsvpStatus
    user_id: int | None = None
    user_name: str | None = None
    user_phone: str | None = None
    guest_name: str | None = None
    guest_phone: str | None = None
    comment: str | None = None
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        if self.user_id is not None and self.user_name:
            return self.user_name
        return self.guest_name or GUEST_FALLBACK_NAME


@dataclass(frozen=True)
class Recipient:
    """Contact details of someone who should receive a reminder."""

    phone: str
    name: str
    user_id: int | None = None


__all__ = ["GUEST_FALLBACK_NAME", "Recipient", "Rsvp", "RsvpStatus"]
