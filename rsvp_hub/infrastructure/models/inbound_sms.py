"""SQLAlchemy model for inbound text messages."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from rsvp_hub.infrastructure.database import Base
from rsvp_hub.utils import now_in_app_naive_datetime


class InboundSmsModel(Base):
    """Database representation of a message received from the carrier."""

    __tablename__ = "inbound_sms"

    id = Column(Integer, primary_key=True, index=True)
    from_phone = Column(String(32), nullable=False, index=True)
    to_phone = Column(String(32), nullable=False, default="")
    message_body = Column(Text, nullable=False)
    carrier_message_sid = Column(String(64), nullable=True, unique=True)
    auto_reply_sent = Column(Boolean, nullable=False, default=False)
    received_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["InboundSmsModel"]
