"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from rsvp_hub.domain.entities import (
    OUTSTANDING_STATUSES,
    Notification,
    NotificationKind,
    NotificationStatus,
    ScheduleType,
)
from rsvp_hub.infrastructure.models import NotificationModel
from rsvp_hub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD and state-transition operations for :class:`Notification`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        return self._to_entity(model)

    def list_for_event(self, event_id: int) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.event_id == event_id)
            .order_by(NotificationModel.scheduled_for.asc(), NotificationModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def count_outstanding(self, event_id: int) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.event_id == event_id)
            .filter(
                NotificationModel.status.in_([status.value for status in OUTSTANDING_STATUSES])
            )
            .scalar()
            or 0
        )

    def get_reminder(self, event_id: int) -> Notification | None:
        """Return the single reminder configured for ``event_id``, if any."""

        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.event_id == event_id)
            .filter(NotificationModel.kind == NotificationKind.REMINDER.value)
            .filter(NotificationModel.status != NotificationStatus.CANCELLED.value)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .first()
        )
        if model is None:
            return None
        return self._to_entity(model)

    def list_due(self, now: datetime) -> Sequence[Notification]:
        """Return pending notifications whose fire time is at or before ``now``."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .filter(NotificationModel.scheduled_for <= ensure_app_naive_datetime(now))
            .order_by(NotificationModel.scheduled_for.asc(), NotificationModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            event_id=notification.event_id,
            kind=notification.kind.value,
            schedule_type=notification.schedule_type.value,
            scheduled_for=ensure_app_naive_datetime(notification.scheduled_for),
            relative_minutes=notification.relative_minutes,
            message_template=notification.message_template,
            status=notification.status.value,
            created_by=notification.created_by,
            created_at=ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def transition_status(
        self,
        notification_id: int,
        *,
        expected: NotificationStatus,
        new: NotificationStatus,
        processed_at: datetime | None = None,
    ) -> bool:
        """Move the notification from ``expected`` to ``new`` atomically.

        The update only matches while the stored status still equals
        ``expected``; the return value tells whether this caller won.
        """

        values: dict[object, object] = {NotificationModel.status: new.value}
        if processed_at is not None:
            values[NotificationModel.processed_at] = ensure_app_naive_datetime(processed_at)
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.status == expected.value)
            .update(values, synchronize_session=False)
        )
        self.session.commit()
        return updated == 1

    def reschedule_pending(
        self,
        notification_id: int,
        *,
        schedule_type: ScheduleType,
        scheduled_for: datetime,
        relative_minutes: int | None,
    ) -> bool:
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .update(
                {
                    NotificationModel.schedule_type: schedule_type.value,
                    NotificationModel.scheduled_for: ensure_app_naive_datetime(
                        scheduled_for
                    ),
                    NotificationModel.relative_minutes: relative_minutes,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def delete_pending(self, notification_id: int) -> bool:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted == 1

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            event_id=model.event_id,
            kind=NotificationKind(model.kind),
            schedule_type=ScheduleType(model.schedule_type),
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            status=NotificationStatus(model.status),
            relative_minutes=model.relative_minutes,
            message_template=model.message_template,
            created_by=model.created_by,
            created_at=ensure_app_timezone(model.created_at),
            processed_at=ensure_app_timezone(model.processed_at),
        )


__all__ = ["NotificationRepository"]
