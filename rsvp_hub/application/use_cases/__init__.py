"""Aggregate application use cases."""

from .realtime import (
    broadcast_event_update,
    broadcast_invite_accepted,
    broadcast_rsvp_update,
)

__all__ = [
    "broadcast_event_update",
    "broadcast_invite_accepted",
    "broadcast_rsvp_update",
]
