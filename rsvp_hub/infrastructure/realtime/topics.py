"""Topic naming for realtime channels."""

from __future__ import annotations

EVENT_TOPIC_PREFIX = "event:"
USER_TOPIC_PREFIX = "user:"


def event_topic(event_slug: str) -> str:
    return f"{EVENT_TOPIC_PREFIX}{event_slug}"


def user_topic(user_id: int | str) -> str:
    return f"{USER_TOPIC_PREFIX}{user_id}"


__all__ = ["EVENT_TOPIC_PREFIX", "USER_TOPIC_PREFIX", "event_topic", "user_topic"]
