"""Tests for the Twilio SMS adapter."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from twilio.base.exceptions import TwilioRestException
from twilio.request_validator import RequestValidator

from rsvp_hub.config import Settings
from rsvp_hub.infrastructure.sms import (
    AUTO_REPLY_MESSAGE,
    MESSAGE_FOOTER,
    SmsConfigurationError,
    SmsDeliveryError,
    TwilioSmsSender,
    describe_twilio_error,
    verify_twilio_signature,
)


class _FakeMessages:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(sid="SM42", status="queued")


def _sender(error: Exception | None = None) -> tuple[TwilioSmsSender, _FakeMessages]:
    messages = _FakeMessages(error)
    client = SimpleNamespace(messages=messages)
    sender = TwilioSmsSender(
        account_sid="AC123", auth_token="token", from_number="+15551230000", client=client
    )
    return sender, messages


def test_send_appends_footer_and_callback() -> None:
    sender, messages = _sender()

    receipt = sender.send("+15550000003", "Hello", status_callback="https://x.test/cb")

    assert (receipt.sid, receipt.status) == ("SM42", "queued")
    assert messages.calls == [
        {
            "to": "+15550000003",
            "from_": "+15551230000",
            "body": "Hello" + MESSAGE_FOOTER,
            "status_callback": "https://x.test/cb",
        }
    ]


def test_send_without_callback_omits_it() -> None:
    sender, messages = _sender()

    sender.send("+15550000003", "Hello")

    assert "status_callback" not in messages.calls[0]


def test_carrier_error_is_wrapped() -> None:
    error = TwilioRestException(400, "/Messages", msg="Invalid 'To' number", code=21211)
    sender, _ = _sender(error)

    with pytest.raises(SmsDeliveryError, match="21211"):
        sender.send("+1", "Hello")


def test_auto_reply_uses_fixed_text() -> None:
    sender, messages = _sender()

    sender.send_auto_reply("+15550000003")

    assert messages.calls[0]["body"] == AUTO_REPLY_MESSAGE


def test_describe_twilio_error_without_code() -> None:
    error = TwilioRestException(503, "/Messages", msg="Service unavailable")

    assert describe_twilio_error(error) == (
        "Twilio request failed with status 503: Service unavailable"
    )
    assert describe_twilio_error(RuntimeError("boom")) == "boom"


def test_from_settings_requires_credentials() -> None:
    with pytest.raises(SmsConfigurationError):
        TwilioSmsSender.from_settings(Settings())


def test_partial_twilio_settings_are_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(twilio_account_sid="AC123")


def test_verify_twilio_signature() -> None:
    settings = Settings(
        twilio_account_sid="AC123",
        twilio_auth_token="token",
        twilio_phone_number="+15551230000",
    )
    url = "https://x.test/webhooks/twilio/status"
    params = {"MessageSid": "SM1", "MessageStatus": "delivered"}
    signature = RequestValidator("token").compute_signature(url, params)

    assert verify_twilio_signature(signature, url, params, settings=settings) is True
    assert verify_twilio_signature("bogus", url, params, settings=settings) is False
