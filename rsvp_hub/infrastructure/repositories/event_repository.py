"""Persistence helpers for event entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from rsvp_hub.domain.entities import Event
from rsvp_hub.infrastructure.models import EventModel
from rsvp_hub.utils import ensure_app_naive_datetime, ensure_app_timezone


class EventRepository:
    """Provide read access to :class:`Event` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, event_id: int) -> Event | None:
        model = self.session.get(EventModel, event_id)
        if model is None:
            return None
        return self._to_entity(model)

    def get_by_slug(self, slug: str) -> Event | None:
        model = (
            self.session.query(EventModel).filter(EventModel.slug == slug).one_or_none()
        )
        if model is None:
            return None
        return self._to_entity(model)

    def create(self, event: Event) -> Event:
        model = EventModel(
            slug=event.slug,
            title=event.title,
            location=event.location,
            datetime=ensure_app_naive_datetime(event.datetime),
            end_datetime=ensure_app_naive_datetime(event.end_datetime),
            timezone=event.timezone,
            organizer_id=event.organizer_id,
            min_players=event.min_players,
            max_players=event.max_players,
            description=event.description,
            allow_sharing=event.allow_sharing,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: EventModel) -> Event:
        return Event(
            id=model.id,
            slug=model.slug,
            title=model.title,
            location=model.location,
            datetime=ensure_app_timezone(model.datetime),
            end_datetime=ensure_app_timezone(model.end_datetime),
            timezone=model.timezone,
            organizer_id=model.organizer_id,
            min_players=model.min_players or 0,
            max_players=model.max_players or 0,
            description=model.description,
            allow_sharing=bool(model.allow_sharing),
        )


__all__ = ["EventRepository"]
