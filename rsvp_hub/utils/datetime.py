"""Timezone helpers shared by the repositories and the notification scheduler.

Datetimes are persisted naive in the application timezone so that sqlite and
server databases compare them the same way. Everything above the repositories
works with aware values, and comparisons between instants go through
:func:`to_utc`.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rsvp_hub.config import get_settings

DEFAULT_TIMEZONE: Final[str] = "America/Denver"

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE`` (``America/Denver`` when unusable)."""

    return resolve_timezone(get_settings().app_timezone)


def resolve_timezone(tz_name: str | None) -> tzinfo:
    """Look up an IANA zone; blank or unknown names give ``DEFAULT_TIMEZONE``."""

    if tz_name and tz_name.strip():
        try:
            return ZoneInfo(tz_name.strip())
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, using %s", tz_name, DEFAULT_TIMEZONE)
    return ZoneInfo(DEFAULT_TIMEZONE)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Column default: the current wall-clock time in the app timezone."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach (naive input) or convert to (aware input) the application timezone."""

    if value is None:
        return None
    zone = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return the app-local wall-clock time of ``value`` without ``tzinfo``."""

    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC instant; naive values are app-local."""

    return ensure_app_timezone(value).astimezone(timezone.utc)


def localize(value: datetime, tz_name: str | None) -> datetime:
    """Express ``value`` in the event zone ``tz_name`` (the app zone when unset)."""

    aware = ensure_app_timezone(value)
    if not tz_name:
        return aware
    return aware.astimezone(resolve_timezone(tz_name))


def evening_before(value: datetime, zone: tzinfo, hour: int) -> datetime:
    """Return ``hour`` o'clock on the calendar day before ``value`` in ``zone``."""

    local_day = ensure_app_timezone(value).astimezone(zone).date()
    return datetime.combine(local_day - timedelta(days=1), time(hour=hour), tzinfo=zone)
