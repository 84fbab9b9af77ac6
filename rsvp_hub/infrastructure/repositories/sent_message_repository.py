"""Persistence helpers for per-recipient sent message records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from rsvp_hub.domain.entities import SentMessage, SentMessageStatus
from rsvp_hub.infrastructure.models import SentMessageModel
from rsvp_hub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class SentMessageRepository:
    """Provide CRUD operations for :class:`SentMessage` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_notification(self, notification_id: int) -> Sequence[SentMessage]:
        query = (
            self.session.query(SentMessageModel)
            .filter(SentMessageModel.notification_id == notification_id)
            .order_by(SentMessageModel.sent_at.asc(), SentMessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def get_by_carrier_sid(self, message_sid: str) -> SentMessage | None:
        model = (
            self.session.query(SentMessageModel)
            .filter(SentMessageModel.carrier_message_sid == message_sid)
            .one_or_none()
        )
        if model is None:
            return None
        return self._to_entity(model)

    def create(self, message: SentMessage) -> SentMessage:
        model = SentMessageModel(
            notification_id=message.notification_id,
            phone_number=message.phone_number,
            recipient_user_id=message.recipient_user_id,
            recipient_name=message.recipient_name,
            message_body=message.message_body,
            status=message.status.value,
            created_at=ensure_app_naive_datetime(
                message.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_sent(
        self,
        message_id: int,
        *,
        message_sid: str,
        carrier_status: str | None,
        sent_at: datetime,
    ) -> SentMessage:
        model = self._require(message_id)
        model.status = SentMessageStatus.SENT.value
        model.carrier_message_sid = message_sid
        model.carrier_status = carrier_status
        model.sent_at = ensure_app_naive_datetime(sent_at)
        return self._save(model)

    def mark_failed(self, message_id: int, *, error_message: str) -> SentMessage:
        model = self._require(message_id)
        model.status = SentMessageStatus.FAILED.value
        model.error_message = error_message
        return self._save(model)

    def update_delivery(
        self,
        message_id: int,
        *,
        status: SentMessageStatus,
        carrier_status: str | None,
        error_message: str | None,
    ) -> SentMessage:
        model = self._require(message_id)
        model.status = status.value
        model.carrier_status = carrier_status
        model.error_message = error_message
        return self._save(model)

    def _require(self, message_id: int) -> SentMessageModel:
        model = self.session.get(SentMessageModel, message_id)
        if model is None:
            msg = f"Sent message with id {message_id} not found"
            raise ValueError(msg)
        return model

    def _save(self, model: SentMessageModel) -> SentMessage:
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: SentMessageModel) -> SentMessage:
        return SentMessage(
            id=model.id,
            notification_id=model.notification_id,
            phone_number=model.phone_number,
            recipient_name=model.recipient_name,
            message_body=model.message_body,
            status=SentMessageStatus(model.status),
            recipient_user_id=model.recipient_user_id,
            carrier_message_sid=model.carrier_message_sid,
            carrier_status=model.carrier_status,
            error_message=model.error_message,
            sent_at=ensure_app_timezone(model.sent_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["SentMessageRepository"]
