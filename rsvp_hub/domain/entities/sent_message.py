"""Domain entity recording one SMS sent for a notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SentMessageStatus(str, Enum):
    """Delivery state of a single outbound SMS."""

    PENDING = "PENDING"
    SENT = "SENT"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


@dataclass
class SentMessage:
    """Per-recipient fan-out record of a notification."""

    id: int | None
    notification_id: int
    phone_number: str
    recipient_name: str | None
    message_body: str
    status: SentMessageStatus
    recipient_user_id: int | None = None
    carrier_message_sid: str | None = None
    carrier_status: str | None = None
    error_message: str | None = None
    sent_at: datetime | None = None
    created_at: datetime | None = None


__all__ = ["SentMessage", "SentMessageStatus"]
