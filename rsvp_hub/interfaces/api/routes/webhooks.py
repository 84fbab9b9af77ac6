"""Callbacks posted by Twilio."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from rsvp_hub.application.use_cases.notifications import (
    handle_inbound_sms,
    record_delivery_status,
)
from rsvp_hub.config import get_settings
from rsvp_hub.infrastructure.database import get_db
from rsvp_hub.infrastructure.sms import SmsSender, verify_twilio_signature
from rsvp_hub.interfaces.api.dependencies import get_optional_sms_sender
from rsvp_hub.interfaces.api.schemas import WebhookAck

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks/twilio", tags=["webhooks"])

EMPTY_TWIML = '<?xml version="1.0" encoding="UTF-8"?><Response></Response>'


async def _read_verified_form(request: Request) -> dict[str, str]:
    """Return the posted form, checking the Twilio signature in production."""

    form = await request.form()
    params = {key: str(value) for key, value in form.items()}

    settings = get_settings()
    if settings.is_production:
        url = str(request.url)
        if settings.public_base_url:
            url = f"{settings.public_base_url.rstrip('/')}{request.url.path}"
        signature = request.headers.get("x-twilio-signature", "")
        if not verify_twilio_signature(signature, url, params, settings=settings):
            logger.warning("Rejected Twilio callback with invalid signature on %s", url)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid Twilio signature",
            )
    return params


@router.post("/status", response_model=WebhookAck, name="twilio_status_callback")
async def twilio_status_callback(
    request: Request,
    db: Session = Depends(get_db),
) -> WebhookAck:
    """Record the delivery receipt of an outgoing message."""

    params = await _read_verified_form(request)
    message_sid = params.get("MessageSid")
    if not message_sid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing MessageSid",
        )

    await run_in_threadpool(
        record_delivery_status,
        db,
        message_sid=message_sid,
        message_status=params.get("MessageStatus"),
        error_code=params.get("ErrorCode"),
        error_message=params.get("ErrorMessage"),
    )
    return WebhookAck()


@router.post("/inbound")
async def twilio_inbound_message(
    request: Request,
    db: Session = Depends(get_db),
    sender: SmsSender | None = Depends(get_optional_sms_sender),
) -> Response:
    """Store a reply from a recipient and answer with the auto-reply."""

    params = await _read_verified_form(request)
    from_phone = params.get("From")
    body = params.get("Body")
    message_sid = params.get("MessageSid")
    if not (message_sid and from_phone and body):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields",
        )

    await run_in_threadpool(
        handle_inbound_sms,
        db,
        from_phone=from_phone,
        to_phone=params.get("To", ""),
        body=body,
        message_sid=message_sid,
        sender=sender,
    )
    return Response(content=EMPTY_TWIML, media_type="text/xml")
