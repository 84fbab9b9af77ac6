"""SQLAlchemy model for group events."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from rsvp_hub.infrastructure.database import Base
from rsvp_hub.utils import now_in_app_naive_datetime


class EventModel(Base):
    """Database representation of an event attendees can RSVP to."""

    __tablename__ = "event"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(64), nullable=False, unique=True, index=True)
    title = Column(String(200), nullable=False)
    location = Column(String(255), nullable=False)
    datetime = Column(DateTime(), nullable=False)
    end_datetime = Column(DateTime(), nullable=False)
    timezone = Column(String(100), nullable=False, default="America/Denver")
    organizer_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    min_players = Column(Integer, nullable=False, default=0)
    max_players = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    allow_sharing = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    organizer = relationship("UserModel", lazy="joined")


__all__ = ["EventModel"]
