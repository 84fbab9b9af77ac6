"""Use cases for scheduling, rescheduling and cancelling event notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from rsvp_hub.config import Settings, get_settings
from rsvp_hub.domain.entities import (
    PROCESSED_STATUSES,
    Event,
    Notification,
    NotificationKind,
    NotificationStatus,
    ScheduleType,
    SentMessage,
)
from rsvp_hub.infrastructure.repositories import (
    NotificationRepository,
    SentMessageRepository,
)
from rsvp_hub.utils import now_in_app_timezone

from .errors import (
    NotificationNotFoundError,
    NotificationStateError,
    NotificationValidationError,
)
from .scheduling import RELATIVE_SCHEDULES, compute_fire_time, validate_fire_time

logger = logging.getLogger(__name__)

MAX_TEMPLATE_LENGTH = 500
MAX_REMINDER_HOURS = 24
REMINDER_SCHEDULES = (
    ScheduleType.NONE,
    ScheduleType.DAY_BEFORE,
    ScheduleType.HOURS_BEFORE,
)
_PROCESSED_MESSAGE = "Cannot modify a notification that has already been processed"


@dataclass
class NotificationView:
    """A notification together with its per-recipient breakdown."""

    notification: Notification
    sent_messages: Sequence[SentMessage] | None = field(default=None)

    @property
    def hours_before(self) -> float | None:
        notification = self.notification
        if (
            notification.schedule_type is ScheduleType.HOURS_BEFORE
            and notification.relative_minutes
        ):
            return notification.relative_minutes / 60
        return None


def create_notification(
    session: Session,
    *,
    event: Event,
    schedule_type: ScheduleType | str,
    created_by: int | None,
    relative_minutes: int | None = None,
    specific_time: datetime | None = None,
    message_template: str | None = None,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> Notification:
    """Schedule an additional notification for ``event``.

    Up to ``max_pending_notifications_per_event`` notifications may be pending
    or processing at once. Nothing is stored when validation fails.
    """

    settings = settings or get_settings()
    schedule_type = ScheduleType(schedule_type)
    repository = NotificationRepository(session)

    if schedule_type is ScheduleType.NONE:
        raise NotificationValidationError("A schedule type is required")

    cap = settings.max_pending_notifications_per_event
    if repository.count_outstanding(event.id) >= cap:
        raise NotificationValidationError(
            f"Maximum of {cap} pending notifications allowed per event"
        )

    template = (message_template or "").strip() or None
    if template is not None and len(template) > MAX_TEMPLATE_LENGTH:
        raise NotificationValidationError(
            f"messageTemplate must be at most {MAX_TEMPLATE_LENGTH} characters"
        )

    scheduled_for = compute_fire_time(
        event.datetime,
        schedule_type,
        relative_minutes,
        specific_time=specific_time,
        tz=event.timezone,
        evening_hour=settings.reminder_evening_hour,
    )
    validate_fire_time(scheduled_for, event.datetime, now or now_in_app_timezone())

    notification = repository.create(
        Notification(
            id=None,
            event_id=event.id,
            kind=NotificationKind.SCHEDULED,
            schedule_type=schedule_type,
            scheduled_for=scheduled_for,
            status=NotificationStatus.PENDING,
            relative_minutes=relative_minutes if schedule_type in RELATIVE_SCHEDULES else None,
            message_template=template,
            created_by=created_by,
        )
    )
    logger.info(
        "Scheduled %s notification %s for event %s at %s",
        schedule_type.value,
        notification.id,
        event.slug,
        notification.scheduled_for.isoformat(),
    )
    return notification


def cancel_notification(
    session: Session, *, event: Event, notification_id: int
) -> Notification:
    """Cancel a notification that has not been claimed by the dispatcher yet."""

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None or notification.event_id != event.id:
        raise NotificationNotFoundError("Notification not found")

    if notification.status is not NotificationStatus.PENDING or not repository.transition_status(
        notification_id,
        expected=NotificationStatus.PENDING,
        new=NotificationStatus.CANCELLED,
    ):
        raise NotificationStateError("Can only cancel pending notifications")

    logger.info("Cancelled notification %s for event %s", notification_id, event.slug)
    cancelled = repository.get(notification_id)
    if cancelled is None:  # pragma: no cover - row deleted concurrently
        raise NotificationNotFoundError("Notification not found")
    return cancelled


def set_event_reminder(
    session: Session,
    *,
    event: Event,
    schedule_type: ScheduleType | str,
    created_by: int | None,
    hours_before: int | None = None,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> Notification | None:
    """Create, replace or remove the single reminder of ``event``.

    ``NONE`` deletes the pending reminder. A reminder that was already sent
    cannot be changed.
    """

    settings = settings or get_settings()
    schedule_type = ScheduleType(schedule_type)
    if schedule_type not in REMINDER_SCHEDULES:
        raise NotificationValidationError(
            f"Reminders support {', '.join(s.value for s in REMINDER_SCHEDULES)} schedules"
        )

    repository = NotificationRepository(session)
    existing = repository.get_reminder(event.id)
    if existing is not None and existing.status is not NotificationStatus.PENDING:
        raise NotificationStateError(_PROCESSED_MESSAGE)

    if schedule_type is ScheduleType.NONE:
        if existing is not None:
            if not repository.delete_pending(existing.id):
                raise NotificationStateError(_PROCESSED_MESSAGE)
            logger.info("Removed reminder %s for event %s", existing.id, event.slug)
        return None

    relative_minutes: int | None = None
    if schedule_type is ScheduleType.HOURS_BEFORE:
        if (
            isinstance(hours_before, bool)
            or not isinstance(hours_before, int)
            or not 1 <= hours_before <= MAX_REMINDER_HOURS
        ):
            raise NotificationValidationError(
                f"hoursBeforeValue between 1 and {MAX_REMINDER_HOURS} is required "
                "for HOURS_BEFORE schedule type"
            )
        relative_minutes = hours_before * 60

    scheduled_for = compute_fire_time(
        event.datetime,
        schedule_type,
        relative_minutes,
        tz=event.timezone,
        evening_hour=settings.reminder_evening_hour,
    )
    validate_fire_time(scheduled_for, event.datetime, now or now_in_app_timezone())

    if existing is not None:
        if not repository.reschedule_pending(
            existing.id,
            schedule_type=schedule_type,
            scheduled_for=scheduled_for,
            relative_minutes=relative_minutes,
        ):
            raise NotificationStateError(_PROCESSED_MESSAGE)
        logger.info("Rescheduled reminder %s for event %s", existing.id, event.slug)
        return repository.get(existing.id)

    reminder = repository.create(
        Notification(
            id=None,
            event_id=event.id,
            kind=NotificationKind.REMINDER,
            schedule_type=schedule_type,
            scheduled_for=scheduled_for,
            status=NotificationStatus.PENDING,
            relative_minutes=relative_minutes,
            created_by=created_by,
        )
    )
    logger.info("Created reminder %s for event %s", reminder.id, event.slug)
    return reminder


def get_event_reminder(session: Session, *, event: Event) -> NotificationView | None:
    """Return the reminder of ``event`` with recipients once it was processed."""

    reminder = NotificationRepository(session).get_reminder(event.id)
    if reminder is None:
        return None
    return _with_breakdown(session, reminder)


def list_event_notifications(session: Session, *, event: Event) -> list[NotificationView]:
    notifications = NotificationRepository(session).list_for_event(event.id)
    return [_with_breakdown(session, notification) for notification in notifications]


def _with_breakdown(session: Session, notification: Notification) -> NotificationView:
    if notification.status not in PROCESSED_STATUSES:
        return NotificationView(notification=notification)
    messages = SentMessageRepository(session).list_for_notification(notification.id)
    return NotificationView(notification=notification, sent_messages=messages)


__all__ = [
    "MAX_REMINDER_HOURS",
    "MAX_TEMPLATE_LENGTH",
    "NotificationView",
    "REMINDER_SCHEDULES",
    "cancel_notification",
    "create_notification",
    "get_event_reminder",
    "list_event_notifications",
    "set_event_reminder",
]
