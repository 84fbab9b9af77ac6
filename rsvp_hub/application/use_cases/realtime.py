"""Realtime helpers for broadcasting RSVP and event changes.

The mutation endpoints call these after their transaction commits. Delivery
is best effort: a return value of ``0`` only means nobody was listening.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rsvp_hub.domain.entities import (
    ActivityEntry,
    Event,
    EventSnapshot,
    EventUpdate,
    InviteAccepted,
    Rsvp,
    RsvpCounts,
    RsvpSnapshot,
    RsvpUpdate,
)
from rsvp_hub.infrastructure.realtime import PubSub, event_topic, user_topic

logger = logging.getLogger(__name__)


def broadcast_rsvp_update(
    registry: PubSub,
    *,
    event_slug: str,
    rsvp: Rsvp,
    rsvp_count: int,
    waitlist_count: int,
    activities: Iterable[ActivityEntry] = (),
) -> int:
    """Tell the viewers of ``event_slug`` that ``rsvp`` changed."""

    payload = RsvpUpdate(
        event_slug=event_slug,
        rsvp=_rsvp_snapshot(rsvp),
        counts=RsvpCounts(rsvp_count=rsvp_count, waitlist_count=waitlist_count),
        activities=tuple(activities),
    )
    delivered = registry.publish(event_topic(event_slug), payload)
    logger.debug("RSVP update for %s delivered to %d connection(s)", event_slug, delivered)
    return delivered


def broadcast_event_update(
    registry: PubSub, *, event: Event, activity: ActivityEntry | None = None
) -> int:
    payload = EventUpdate(
        event_slug=event.slug,
        event=EventSnapshot(
            location=event.location,
            datetime=event.datetime,
            end_datetime=event.end_datetime,
            min_players=event.min_players,
            max_players=event.max_players,
            description=event.description,
            allow_sharing=event.allow_sharing,
        ),
        activity=activity,
    )
    delivered = registry.publish(event_topic(event.slug), payload)
    logger.debug("Event update for %s delivered to %d connection(s)", event.slug, delivered)
    return delivered


def broadcast_invite_accepted(
    registry: PubSub,
    *,
    owner_id: int | str,
    acceptor_name: str,
    acceptor_phone: str,
    group_names: Iterable[str] = (),
    added_group_ids: Iterable[int | str] = (),
) -> int:
    """Let the invite owner know someone joined through their link."""

    payload = InviteAccepted(
        acceptor_name=acceptor_name,
        acceptor_phone=acceptor_phone,
        group_names=tuple(group_names),
        added_group_ids=tuple(str(group_id) for group_id in added_group_ids),
    )
    return registry.publish(user_topic(owner_id), payload)


def _rsvp_snapshot(rsvp: Rsvp) -> RsvpSnapshot:
    return RsvpSnapshot(
        id=str(rsvp.id),
        user_id=str(rsvp.user_id) if rsvp.user_id is not None else None,
        status=rsvp.status.value,
        comment=rsvp.comment,
        name=rsvp.display_name,
    )


__all__ = [
    "broadcast_event_update",
    "broadcast_invite_accepted",
    "broadcast_rsvp_update",
]
