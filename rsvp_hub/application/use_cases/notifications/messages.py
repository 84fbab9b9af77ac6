"""Text rendered into reminder messages."""

from __future__ import annotations

from rsvp_hub.domain.entities import Event
from rsvp_hub.utils import localize


def build_notification_message(event: Event, custom_message: str | None = None) -> str:
    """Return the reminder body, preferring the organizer's custom text."""

    if custom_message:
        return custom_message

    start = localize(event.datetime, event.timezone)
    day = f"{start:%a}, {start:%b} {start.day}"
    hour = start.hour % 12 or 12
    meridiem = "AM" if start.hour < 12 else "PM"
    return (
        f"Reminder: {event.title} is {day} at {hour}:{start:%M} {meridiem}. "
        f"See you at {event.location}!"
    )


__all__ = ["build_notification_message"]
