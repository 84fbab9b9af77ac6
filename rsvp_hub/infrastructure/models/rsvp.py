"""SQLAlchemy model for event responses."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from rsvp_hub.infrastructure.database import Base
from rsvp_hub.utils import now_in_app_naive_datetime


class RsvpModel(Base):
    """Database representation of an RSVP from a user or a guest."""

    __tablename__ = "rsvp"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("event.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status = Column(String(20), nullable=False, index=True)
    guest_name = Column(String(100), nullable=True)
    guest_phone = Column(String(32), nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    user = relationship("UserModel", lazy="joined")


__all__ = ["RsvpModel"]
