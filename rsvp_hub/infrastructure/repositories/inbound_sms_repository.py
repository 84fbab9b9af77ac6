"""Persistence helpers for inbound text messages."""

from __future__ import annotations

from sqlalchemy.orm import Session

from rsvp_hub.domain.entities import InboundSms
from rsvp_hub.infrastructure.models import InboundSmsModel
from rsvp_hub.utils import ensure_app_timezone


class InboundSmsRepository:
    """Store messages received from the carrier."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, message: InboundSms) -> InboundSms:
        model = InboundSmsModel(
            from_phone=message.from_phone,
            to_phone=message.to_phone,
            message_body=message.message_body,
            carrier_message_sid=message.carrier_message_sid,
            auto_reply_sent=message.auto_reply_sent,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_auto_reply_sent(self, message_id: int) -> None:
        self.session.query(InboundSmsModel).filter(
            InboundSmsModel.id == message_id
        ).update({InboundSmsModel.auto_reply_sent: True}, synchronize_session=False)
        self.session.commit()

    def get(self, message_id: int) -> InboundSms | None:
        model = self.session.get(InboundSmsModel, message_id)
        if model is None:
            return None
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: InboundSmsModel) -> InboundSms:
        return InboundSms(
            id=model.id,
            from_phone=model.from_phone,
            to_phone=model.to_phone,
            message_body=model.message_body,
            carrier_message_sid=model.carrier_message_sid,
            auto_reply_sent=bool(model.auto_reply_sent),
            received_at=ensure_app_timezone(model.received_at),
        )


__all__ = ["InboundSmsRepository"]
