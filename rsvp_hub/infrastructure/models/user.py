"""SQLAlchemy model for application users."""

from sqlalchemy import Column, DateTime, Integer, String

from rsvp_hub.infrastructure.database import Base
from rsvp_hub.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of an application user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(32), nullable=True, unique=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["UserModel"]
