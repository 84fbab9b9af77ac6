"""Domain entity for text messages received from attendees."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class InboundSms:
    """A message sent by someone replying to a reminder."""

    id: int | None
    from_phone: str
    to_phone: str
    message_body: str
    carrier_message_sid: str | None
    auto_reply_sent: bool = False
    received_at: datetime | None = None


__all__ = ["InboundSms"]
