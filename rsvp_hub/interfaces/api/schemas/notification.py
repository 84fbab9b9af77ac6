"""Pydantic models describing notification requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rsvp_hub.domain.entities import (
    NotificationKind,
    NotificationStatus,
    ScheduleType,
    SentMessageStatus,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationCreate(_CamelModel):
    """Payload used by organizers to schedule an extra notification."""

    schedule_type: ScheduleType
    relative_minutes: int | None = None
    specific_time: datetime | None = None
    message_template: str | None = None

    model_config = ConfigDict(extra="forbid")


class ReminderUpdate(_CamelModel):
    schedule_type: ScheduleType
    hours_before_value: int | None = None


class RecipientRead(_CamelModel):
    """Outcome of a notification for one recipient."""

    name: str
    status: SentMessageStatus
    sent_at: datetime | None = None
    error_message: str | None = None


class NotificationRead(_CamelModel):
    id: int
    kind: NotificationKind
    schedule_type: ScheduleType
    scheduled_for: datetime
    status: NotificationStatus
    relative_minutes: int | None = None
    hours_before_value: float | None = None
    message_template: str | None = None
    created_at: datetime | None = None
    processed_at: datetime | None = None
    recipients: list[RecipientRead] | None = None


class NotificationListResponse(_CamelModel):
    notifications: list[NotificationRead]
    is_organizer: bool


class ReminderResponse(_CamelModel):
    reminder: NotificationRead | None
    is_organizer: bool


class DispatchResultRead(_CamelModel):
    notification_id: int
    event_slug: str | None
    sent: int
    failed: int
    status: NotificationStatus
    error: str | None = None


class DispatchSummaryRead(_CamelModel):
    """Response of one dispatcher run."""

    processed: int
    results: list[DispatchResultRead]


class WebhookAck(BaseModel):
    success: bool = True


__all__ = [
    "DispatchResultRead",
    "DispatchSummaryRead",
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationRead",
    "RecipientRead",
    "ReminderResponse",
    "ReminderUpdate",
    "WebhookAck",
]
