"""Domain entity representing a scheduled group event."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Event:
    """Subset of event attributes consumed by reminders and live updates."""

    id: int | None
    slug: str
    title: str
    location: str
    datetime: datetime
    end_datetime: datetime
    timezone: str
    organizer_id: int
    min_players: int = 0
    max_players: int = 0
    description: str | None = None
    allow_sharing: bool = True

    def is_organized_by(self, user_id: int | None) -> bool:
        """Return ``True`` when ``user_id`` organizes this event."""

        return user_id is not None and self.organizer_id == user_id


__all__ = ["Event"]
