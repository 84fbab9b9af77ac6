"""Domain entities describing scheduled event notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ScheduleType(str, Enum):
    """Policy used to compute when a notification fires."""

    NONE = "NONE"
    DAY_BEFORE = "DAY_BEFORE"
    HOURS_BEFORE = "HOURS_BEFORE"
    MINUTES_BEFORE = "MINUTES_BEFORE"
    SPECIFIC_TIME = "SPECIFIC_TIME"


class NotificationKind(str, Enum):
    """Distinguishes the single per-event reminder from general notifications."""

    REMINDER = "REMINDER"
    SCHEDULED = "SCHEDULED"


class NotificationStatus(str, Enum):
    """Lifecycle of a notification."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    PARTIALLY_FAILED = "PARTIALLY_FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_outstanding(self) -> bool:
        return self in (NotificationStatus.PENDING, NotificationStatus.PROCESSING)

    @property
    def is_terminal(self) -> bool:
        return not self.is_outstanding


OUTSTANDING_STATUSES = (NotificationStatus.PENDING, NotificationStatus.PROCESSING)
PROCESSED_STATUSES = (
    NotificationStatus.COMPLETED,
    NotificationStatus.FAILED,
    NotificationStatus.PARTIALLY_FAILED,
)


@dataclass
class Notification:
    """A reminder scheduled to be sent to the confirmed attendees of an event."""

    id: int | None
    event_id: int
    kind: NotificationKind
    schedule_type: ScheduleType
    scheduled_for: datetime
    status: NotificationStatus
    relative_minutes: int | None = None
    message_template: str | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    processed_at: datetime | None = None


def aggregate_status(sent: int, failed: int) -> NotificationStatus:
    """Return the terminal status for a notification given its send counts."""

    if failed == 0:
        return NotificationStatus.COMPLETED
    if sent == 0:
        return NotificationStatus.FAILED
    return NotificationStatus.PARTIALLY_FAILED


__all__ = [
    "Notification",
    "NotificationKind",
    "NotificationStatus",
    "OUTSTANDING_STATUSES",
    "PROCESSED_STATUSES",
    "ScheduleType",
    "aggregate_status",
]
