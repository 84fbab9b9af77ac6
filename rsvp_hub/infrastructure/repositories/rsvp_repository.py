"""Persistence helpers for RSVP entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session, joinedload

from rsvp_hub.domain.entities import Rsvp, RsvpStatus
from rsvp_hub.infrastructure.models import RsvpModel
from rsvp_hub.utils import ensure_app_timezone


class RsvpRepository:
    """Provide access to the responses recorded for an event."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_by_status(self, event_id: int, status: RsvpStatus) -> Sequence[Rsvp]:
        query = (
            self.session.query(RsvpModel)
            .options(joinedload(RsvpModel.user))
            .filter(RsvpModel.event_id == event_id)
            .filter(RsvpModel.status == status.value)
            .order_by(RsvpModel.created_at.asc(), RsvpModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_confirmed(self, event_id: int) -> Sequence[Rsvp]:
        """Return the ``IN`` responses as they stand right now."""

        return self.list_by_status(event_id, RsvpStatus.IN)

    def create(self, rsvp: Rsvp) -> Rsvp:
        model = RsvpModel(
            event_id=rsvp.event_id,
            user_id=rsvp.user_id,
            status=rsvp.status.value,
            guest_name=rsvp.guest_name,
            guest_phone=rsvp.guest_phone,
            comment=rsvp.comment,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_status(self, rsvp_id: int, status: RsvpStatus) -> None:
        model = self.session.get(RsvpModel, rsvp_id)
        if model is None:
            msg = f"RSVP with id {rsvp_id} not found"
            raise ValueError(msg)
        model.status = status.value
        self.session.commit()

    @staticmethod
    def _to_entity(model: RsvpModel) -> Rsvp:
        user = model.user
        return Rsvp(
            id=model.id,
            event_id=model.event_id,
            status=RsvpStatus(model.status),
            user_id=model.user_id,
            user_name=user.name if user is not None else None,
            user_phone=user.phone if user is not None else None,
            guest_name=model.guest_name,
            guest_phone=model.guest_phone,
            comment=model.comment,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["RsvpRepository"]
