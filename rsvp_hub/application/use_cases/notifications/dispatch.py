"""Send the reminders that are due and record the outcome per recipient."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from rsvp_hub.domain.entities import (
    GUEST_FALLBACK_NAME,
    Event,
    Notification,
    NotificationStatus,
    Recipient,
    Rsvp,
    SentMessage,
    SentMessageStatus,
    aggregate_status,
)
from rsvp_hub.infrastructure.repositories import (
    EventRepository,
    NotificationRepository,
    RsvpRepository,
    SentMessageRepository,
)
from rsvp_hub.infrastructure.sms import SmsDeliveryError, SmsSender
from rsvp_hub.utils import now_in_app_timezone

from .messages import build_notification_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationDispatchResult:
    notification_id: int
    event_slug: str | None
    sent: int
    failed: int
    status: NotificationStatus
    error: str | None = None


@dataclass
class DispatchSummary:
    """Outcome of one pass over the due notifications."""

    processed: int = 0
    results: list[NotificationDispatchResult] = field(default_factory=list)


def resolve_recipients(rsvps: Iterable[Rsvp]) -> list[Recipient]:
    """Turn confirmed responses into phone recipients.

    Registered users are reached on their own phone, guests on the phone they
    left. Responses without any phone number are skipped.
    """

    recipients: list[Recipient] = []
    for rsvp in rsvps:
        if rsvp.user_id is not None and rsvp.user_phone:
            recipients.append(
                Recipient(
                    phone=rsvp.user_phone,
                    name=rsvp.user_name or GUEST_FALLBACK_NAME,
                    user_id=rsvp.user_id,
                )
            )
        elif rsvp.guest_phone:
            recipients.append(
                Recipient(
                    phone=rsvp.guest_phone,
                    name=rsvp.guest_name or GUEST_FALLBACK_NAME,
                )
            )
    return recipients


def dispatch_due_notifications(
    session: Session,
    *,
    sender: SmsSender,
    now: datetime | None = None,
    status_callback_url: str | None = None,
) -> DispatchSummary:
    """Process every pending notification whose fire time has passed.

    Each notification is claimed before anything is sent, so overlapping runs
    never message the same audience twice. A failure while processing one
    notification marks only that notification as failed.
    """

    now = now or now_in_app_timezone()
    due = NotificationRepository(session).list_due(now)
    summary = DispatchSummary()
    if not due:
        logger.debug("No notifications due at %s", now.isoformat())
        return summary

    logger.info("Found %d notification(s) due", len(due))
    for notification in due:
        result = process_notification(
            session,
            notification,
            sender=sender,
            status_callback_url=status_callback_url,
        )
        if result is None:
            continue
        summary.processed += 1
        summary.results.append(result)
    return summary


def process_notification(
    session: Session,
    notification: Notification,
    *,
    sender: SmsSender,
    status_callback_url: str | None = None,
) -> NotificationDispatchResult | None:
    """Send one notification; returns ``None`` when another run claimed it."""

    notifications = NotificationRepository(session)
    if not notifications.transition_status(
        notification.id,
        expected=NotificationStatus.PENDING,
        new=NotificationStatus.PROCESSING,
    ):
        logger.info("Notification %s already claimed; skipping", notification.id)
        return None

    event: Event | None = None
    try:
        event = EventRepository(session).get(notification.event_id)
        if event is None:
            raise LookupError(f"Event {notification.event_id} not found")

        recipients = resolve_recipients(RsvpRepository(session).list_confirmed(event.id))
        if not recipients:
            _finish(notifications, notification.id, NotificationStatus.COMPLETED)
            logger.info(
                "Notification %s for event %s has no recipients", notification.id, event.slug
            )
            return NotificationDispatchResult(
                notification_id=notification.id,
                event_slug=event.slug,
                sent=0,
                failed=0,
                status=NotificationStatus.COMPLETED,
            )

        body = build_notification_message(event, notification.message_template)
        sent, failed = _send_to_recipients(
            SentMessageRepository(session),
            notification,
            recipients,
            body,
            sender=sender,
            status_callback_url=status_callback_url,
        )
        status = aggregate_status(sent, failed)
        _finish(notifications, notification.id, status)
        logger.info(
            "Notification %s for event %s finished as %s (sent=%d, failed=%d)",
            notification.id,
            event.slug,
            status.value,
            sent,
            failed,
        )
        return NotificationDispatchResult(
            notification_id=notification.id,
            event_slug=event.slug,
            sent=sent,
            failed=failed,
            status=status,
        )
    except Exception as exc:
        session.rollback()
        logger.exception("Error processing notification %s", notification.id)
        _finish(notifications, notification.id, NotificationStatus.FAILED)
        return NotificationDispatchResult(
            notification_id=notification.id,
            event_slug=event.slug if event is not None else None,
            sent=0,
            failed=0,
            status=NotificationStatus.FAILED,
            error=str(exc) or exc.__class__.__name__,
        )


def _send_to_recipients(
    messages: SentMessageRepository,
    notification: Notification,
    recipients: Sequence[Recipient],
    body: str,
    *,
    sender: SmsSender,
    status_callback_url: str | None,
) -> tuple[int, int]:
    sent = 0
    failed = 0
    for recipient in recipients:
        record = messages.create(
            SentMessage(
                id=None,
                notification_id=notification.id,
                phone_number=recipient.phone,
                recipient_name=recipient.name,
                message_body=body,
                status=SentMessageStatus.PENDING,
                recipient_user_id=recipient.user_id,
            )
        )
        try:
            receipt = sender.send(recipient.phone, body, status_callback=status_callback_url)
            messages.mark_sent(
                record.id,
                message_sid=receipt.sid,
                carrier_status=receipt.status,
                sent_at=now_in_app_timezone(),
            )
        except SmsDeliveryError as exc:
            logger.warning(
                "Failed to send notification %s to %s: %s",
                notification.id,
                recipient.name,
                exc,
            )
            _record_failure(messages, record.id, str(exc))
            failed += 1
        except Exception as exc:
            logger.exception(
                "Unexpected error sending notification %s to %s",
                notification.id,
                recipient.name,
            )
            _record_failure(messages, record.id, str(exc) or exc.__class__.__name__)
            failed += 1
        else:
            sent += 1
    return sent, failed


def _record_failure(messages: SentMessageRepository, message_id: int, error: str) -> None:
    # A failed flush leaves the session unusable until it is rolled back.
    messages.session.rollback()
    messages.mark_failed(message_id, error_message=error)


def _finish(
    notifications: NotificationRepository,
    notification_id: int,
    status: NotificationStatus,
) -> None:
    notifications.transition_status(
        notification_id,
        expected=NotificationStatus.PROCESSING,
        new=status,
        processed_at=now_in_app_timezone(),
    )


__all__ = [
    "DispatchSummary",
    "NotificationDispatchResult",
    "dispatch_due_notifications",
    "process_notification",
    "resolve_recipients",
]
