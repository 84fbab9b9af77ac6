"""Carrier callbacks: delivery receipts and replies from recipients."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from rsvp_hub.domain.entities import InboundSms, SentMessage, SentMessageStatus
from rsvp_hub.infrastructure.repositories import (
    InboundSmsRepository,
    SentMessageRepository,
)
from rsvp_hub.infrastructure.sms import SmsDeliveryError, SmsSender

logger = logging.getLogger(__name__)

_DELIVERY_STATUSES = {
    "delivered": SentMessageStatus.DELIVERED,
    "failed": SentMessageStatus.FAILED,
    "undelivered": SentMessageStatus.FAILED,
}


def map_delivery_status(message_status: str | None) -> SentMessageStatus:
    """Translate a carrier status into the stored per-recipient status."""

    return _DELIVERY_STATUSES.get((message_status or "").lower(), SentMessageStatus.SENT)


def record_delivery_status(
    session: Session,
    *,
    message_sid: str,
    message_status: str | None,
    error_code: str | None = None,
    error_message: str | None = None,
) -> SentMessage | None:
    """Store the delivery outcome reported for ``message_sid``.

    Unknown sids are ignored so the carrier does not retry the callback. The
    parent notification keeps its status.
    """

    repository = SentMessageRepository(session)
    message = repository.get_by_carrier_sid(message_sid)
    if message is None:
        logger.info("Delivery status for unknown message %s ignored", message_sid)
        return None

    status = map_delivery_status(message_status)
    detail = f"{error_code}: {error_message or 'Unknown error'}" if error_code else None
    updated = repository.update_delivery(
        message.id,
        status=status,
        carrier_status=message_status,
        error_message=detail,
    )
    if status is SentMessageStatus.FAILED:
        logger.warning("Message %s was not delivered: %s", message_sid, detail)
    else:
        logger.debug("Message %s is now %s", message_sid, status.value)
    return updated


def handle_inbound_sms(
    session: Session,
    *,
    from_phone: str,
    to_phone: str,
    body: str,
    message_sid: str | None,
    sender: SmsSender | None,
) -> InboundSms:
    """Keep the reply and point the sender to the organizer."""

    repository = InboundSmsRepository(session)
    inbound = repository.create(
        InboundSms(
            id=None,
            from_phone=from_phone,
            to_phone=to_phone,
            message_body=body,
            carrier_message_sid=message_sid,
        )
    )
    if sender is None or not from_phone:
        return inbound

    try:
        sender.send_auto_reply(from_phone)
    except SmsDeliveryError as exc:
        logger.warning("Auto-reply for inbound message %s failed: %s", inbound.id, exc)
        return inbound

    repository.mark_auto_reply_sent(inbound.id)
    inbound.auto_reply_sent = True
    return inbound


__all__ = ["handle_inbound_sms", "map_delivery_status", "record_delivery_status"]
