"""Compute and validate the fire time of event notifications."""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo

from rsvp_hub.domain.entities import ScheduleType
from rsvp_hub.utils import ensure_app_timezone, evening_before, resolve_timezone, to_utc

from .errors import NotificationValidationError

DEFAULT_EVENING_HOUR = 18
RELATIVE_SCHEDULES = (ScheduleType.HOURS_BEFORE, ScheduleType.MINUTES_BEFORE)


def compute_fire_time(
    event_start: datetime,
    schedule_type: ScheduleType | str,
    relative_minutes: int | None = None,
    *,
    specific_time: datetime | None = None,
    tz: tzinfo | str | None = None,
    evening_hour: int = DEFAULT_EVENING_HOUR,
) -> datetime:
    """Return the absolute instant a notification should fire.

    ``DAY_BEFORE`` lands on the previous calendar day at ``evening_hour`` in
    the event's local timezone (``tz``, or the timezone of ``event_start``).
    ``HOURS_BEFORE`` and ``MINUTES_BEFORE`` subtract ``relative_minutes`` of
    elapsed time from the start. ``SPECIFIC_TIME`` returns ``specific_time``.
    ``NONE`` means no notification and is rejected.
    """

    schedule_type = ScheduleType(schedule_type)
    start = ensure_app_timezone(event_start)

    if schedule_type is ScheduleType.NONE:
        raise NotificationValidationError("A NONE schedule has no fire time")

    if schedule_type is ScheduleType.DAY_BEFORE:
        return evening_before(start, _zone(tz) or start.tzinfo, evening_hour)

    if schedule_type in RELATIVE_SCHEDULES:
        if (
            isinstance(relative_minutes, bool)
            or not isinstance(relative_minutes, int)
            or relative_minutes <= 0
        ):
            raise NotificationValidationError(
                "relativeMinutes must be a positive integer for "
                f"{schedule_type.value} schedules"
            )
        instant = to_utc(start) - timedelta(minutes=relative_minutes)
        return instant.astimezone(start.tzinfo)

    if specific_time is None:
        raise NotificationValidationError(
            "specificTime is required for SPECIFIC_TIME schedules"
        )
    if specific_time.tzinfo is None:
        return ensure_app_timezone(specific_time)
    return specific_time


def validate_fire_time(fire_time: datetime, event_start: datetime, now: datetime) -> None:
    """Reject fire times that are not strictly between ``now`` and the event start."""

    fire_time = to_utc(fire_time)
    if fire_time <= to_utc(now):
        raise NotificationValidationError(
            "Notification must be scheduled for a future time"
        )
    if fire_time >= to_utc(event_start):
        raise NotificationValidationError(
            "Notification must be scheduled before the event starts"
        )


def _zone(tz: tzinfo | str | None) -> tzinfo | None:
    if isinstance(tz, str):
        return resolve_timezone(tz) if tz.strip() else None
    return tz


__all__ = [
    "DEFAULT_EVENING_HOUR",
    "RELATIVE_SCHEDULES",
    "compute_fire_time",
    "validate_fire_time",
]
