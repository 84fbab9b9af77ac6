"""Persistence helpers for user entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from rsvp_hub.domain.entities import User
from rsvp_hub.infrastructure.models import UserModel


class UserRepository:
    """Provide lookup operations for :class:`User` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            return None
        return self._to_entity(model)

    def create(self, user: User) -> User:
        model = UserModel(name=user.name, phone=user.phone)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(id=model.id, name=model.name, phone=model.phone)


__all__ = ["UserRepository"]
