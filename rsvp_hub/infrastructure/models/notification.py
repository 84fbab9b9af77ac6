"""SQLAlchemy models for scheduled notifications and their sent messages."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from rsvp_hub.infrastructure.database import Base
from rsvp_hub.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation of a reminder scheduled for an event."""

    __tablename__ = "event_notification"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("event.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(String(20), nullable=False, default="SCHEDULED")
    schedule_type = Column(String(20), nullable=False)
    scheduled_for = Column(DateTime(), nullable=False, index=True)
    relative_minutes = Column(Integer, nullable=True)
    message_template = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="PENDING", index=True)
    created_by = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    processed_at = Column(DateTime(), nullable=True)

    event = relationship("EventModel", lazy="joined")
    sent_messages = relationship(
        "SentMessageModel",
        back_populates="notification",
        cascade="all, delete-orphan",
        order_by="SentMessageModel.id",
    )


class SentMessageModel(Base):
    """Database representation of one SMS sent for a notification."""

    __tablename__ = "sent_notification"

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        Integer,
        ForeignKey("event_notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    phone_number = Column(String(32), nullable=False)
    recipient_user_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    recipient_name = Column(String(100), nullable=True)
    message_body = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="PENDING")
    carrier_message_sid = Column(String(64), nullable=True, unique=True, index=True)
    carrier_status = Column(String(32), nullable=True)
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    notification = relationship("NotificationModel", back_populates="sent_messages")


__all__ = ["NotificationModel", "SentMessageModel"]
