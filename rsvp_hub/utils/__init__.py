"""Utility helpers for reusable functionality."""

from .datetime import (
    DEFAULT_TIMEZONE,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    evening_before,
    get_app_timezone,
    localize,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    resolve_timezone,
    to_utc,
)

__all__ = [
    "DEFAULT_TIMEZONE",
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "evening_before",
    "get_app_timezone",
    "localize",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "resolve_timezone",
    "to_utc",
]
