"""Scheduler entry point that sends the notifications that are due."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from rsvp_hub.application.use_cases.notifications import dispatch_due_notifications
from rsvp_hub.config import get_settings
from rsvp_hub.infrastructure.database import get_db
from rsvp_hub.infrastructure.sms import SmsSender
from rsvp_hub.interfaces.api.dependencies import get_sms_sender, require_cron_secret
from rsvp_hub.interfaces.api.schemas import DispatchResultRead, DispatchSummaryRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])


def _status_callback_url(request: Request) -> str:
    base_url = get_settings().public_base_url
    if base_url:
        return f"{base_url.rstrip('/')}/webhooks/twilio/status"
    return str(request.url_for("twilio_status_callback"))


@router.post(
    "/process-notifications",
    response_model=DispatchSummaryRead,
    dependencies=[Depends(require_cron_secret)],
)
def process_notifications(
    request: Request,
    db: Session = Depends(get_db),
    sender: SmsSender = Depends(get_sms_sender),
) -> DispatchSummaryRead:
    """Send every pending notification whose fire time has passed."""

    summary = dispatch_due_notifications(
        db, sender=sender, status_callback_url=_status_callback_url(request)
    )
    if summary.processed:
        logger.info("Dispatcher run processed %d notification(s)", summary.processed)
    return DispatchSummaryRead(
        processed=summary.processed,
        results=[
            DispatchResultRead(
                notification_id=result.notification_id,
                event_slug=result.event_slug,
                sent=result.sent,
                failed=result.failed,
                status=result.status,
                error=result.error,
            )
            for result in summary.results
        ],
    )
