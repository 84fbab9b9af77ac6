"""Utility helpers for sending SMS reminders through Twilio."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from twilio.base.exceptions import TwilioRestException
from twilio.request_validator import RequestValidator
from twilio.rest import Client

from rsvp_hub.config import Settings, get_settings

logger = logging.getLogger(__name__)

MESSAGE_FOOTER = "\n---\nThis is an automated message. Do not reply."
AUTO_REPLY_MESSAGE = "Do not respond to this text. Contact the event organizer directly."


class SmsConfigurationError(RuntimeError):
    """Raised when Twilio credentials are missing."""


class SmsDeliveryError(RuntimeError):
    """Raised when the carrier does not accept a message."""


@dataclass(frozen=True)
class SmsReceipt:
    """Handle returned by the carrier for an accepted message."""

    sid: str
    status: str | None


class SmsSender(Protocol):
    """Anything able to hand a text message to a carrier."""

    def send(
        self, to: str, body: str, *, status_callback: str | None = None
    ) -> SmsReceipt:
        ...

    def send_auto_reply(self, to: str) -> SmsReceipt:
        ...


def describe_twilio_error(exc: Exception) -> str:
    """Return a human readable description for a Twilio failure."""

    if isinstance(exc, TwilioRestException):
        details = exc.msg or str(exc)
        if exc.code:
            return f"Twilio error {exc.code} (status {exc.status}): {details}"
        return f"Twilio request failed with status {exc.status}: {details}"
    return str(exc) or exc.__class__.__name__


class TwilioSmsSender:
    """Send text messages with the configured Twilio account."""

    def __init__(
        self,
        *,
        account_sid: str,
        auth_token: str,
        from_number: str,
        client: Client | None = None,
    ) -> None:
        self._from_number = from_number
        self._client = client or Client(account_sid, auth_token)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TwilioSmsSender":
        settings = settings or get_settings()
        if not (
            settings.twilio_account_sid
            and settings.twilio_auth_token
            and settings.twilio_phone_number
        ):
            raise SmsConfigurationError("Twilio credentials not configured")
        return cls(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            from_number=settings.twilio_phone_number,
        )

    def send(
        self, to: str, body: str, *, status_callback: str | None = None
    ) -> SmsReceipt:
        """Send ``body`` to ``to`` with the automated-message footer appended."""

        options: dict[str, str] = {
            "to": to,
            "from_": self._from_number,
            "body": body + MESSAGE_FOOTER,
        }
        if status_callback:
            options["status_callback"] = status_callback

        try:
            message = self._client.messages.create(**options)
        except Exception as exc:
            details = describe_twilio_error(exc)
            logger.error("Twilio rejected SMS to %s: %s", _mask(to), details)
            raise SmsDeliveryError(details) from exc

        return SmsReceipt(sid=message.sid, status=message.status)

    def send_auto_reply(self, to: str) -> SmsReceipt:
        """Tell someone replying to a reminder that the number is not monitored."""

        try:
            message = self._client.messages.create(
                to=to, from_=self._from_number, body=AUTO_REPLY_MESSAGE
            )
        except Exception as exc:
            details = describe_twilio_error(exc)
            logger.error("Failed to send auto-reply to %s: %s", _mask(to), details)
            raise SmsDeliveryError(details) from exc
        return SmsReceipt(sid=message.sid, status=message.status)


def verify_twilio_signature(
    signature: str,
    url: str,
    params: Mapping[str, str],
    *,
    settings: Settings | None = None,
) -> bool:
    """Return ``True`` when ``signature`` matches the Twilio webhook request."""

    settings = settings or get_settings()
    if not settings.twilio_auth_token:
        return False
    validator = RequestValidator(settings.twilio_auth_token)
    return bool(validator.validate(url, dict(params), signature))


def _mask(phone: str) -> str:
    if len(phone) <= 4:
        return "****"
    return "*" * (len(phone) - 4) + phone[-4:]


__all__ = [
    "AUTO_REPLY_MESSAGE",
    "MESSAGE_FOOTER",
    "SmsConfigurationError",
    "SmsDeliveryError",
    "SmsReceipt",
    "SmsSender",
    "TwilioSmsSender",
    "describe_twilio_error",
    "verify_twilio_signature",
]
