"""Routes for managing the SMS notifications of an event."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from rsvp_hub.application.use_cases.notifications import (
    NotificationNotFoundError,
    NotificationView,
    cancel_notification as cancel_notification_uc,
    create_notification as create_notification_uc,
    get_event_reminder as get_event_reminder_uc,
    list_event_notifications as list_event_notifications_uc,
    set_event_reminder as set_event_reminder_uc,
)
from rsvp_hub.domain.entities import Event, Notification, User
from rsvp_hub.infrastructure.database import get_db
from rsvp_hub.interfaces.api.dependencies import (
    get_current_user,
    get_event,
    require_organizer,
)
from rsvp_hub.interfaces.api.schemas import (
    NotificationCreate,
    NotificationListResponse,
    NotificationRead,
    RecipientRead,
    ReminderResponse,
    ReminderUpdate,
)

router = APIRouter(prefix="/events/{slug}", tags=["notifications"])


def _to_schema(view: NotificationView) -> NotificationRead:
    notification = view.notification
    recipients = None
    if view.sent_messages is not None:
        recipients = [
            RecipientRead(
                name=message.recipient_name or "Unknown",
                status=message.status,
                sent_at=message.sent_at,
                error_message=message.error_message,
            )
            for message in view.sent_messages
        ]
    return NotificationRead(
        id=notification.id or 0,
        kind=notification.kind,
        schedule_type=notification.schedule_type,
        scheduled_for=notification.scheduled_for,
        status=notification.status,
        relative_minutes=notification.relative_minutes,
        hours_before_value=view.hours_before,
        message_template=notification.message_template,
        created_at=notification.created_at,
        processed_at=notification.processed_at,
        recipients=recipients,
    )


def _raise_http(exc: ValueError) -> HTTPException:
    if isinstance(exc, NotificationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(
    event: Event = Depends(get_event),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationListResponse:
    """Return every notification of the event ordered by fire time."""

    views = list_event_notifications_uc(db, event=event)
    return NotificationListResponse(
        notifications=[_to_schema(view) for view in views],
        is_organizer=event.is_organized_by(current_user.id),
    )


@router.post(
    "/notifications",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    payload: NotificationCreate,
    event: Event = Depends(get_event),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRead:
    require_organizer(event, current_user)
    try:
        notification = create_notification_uc(
            db,
            event=event,
            schedule_type=payload.schedule_type,
            relative_minutes=payload.relative_minutes,
            specific_time=payload.specific_time,
            message_template=payload.message_template,
            created_by=current_user.id,
        )
    except ValueError as exc:
        raise _raise_http(exc) from exc
    return _to_schema(NotificationView(notification=notification))


@router.delete("/notifications/{notification_id}", response_model=NotificationRead)
def cancel_notification(
    notification_id: int,
    event: Event = Depends(get_event),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRead:
    """Cancel a notification that has not been sent yet."""

    require_organizer(event, current_user)
    try:
        notification = cancel_notification_uc(
            db, event=event, notification_id=notification_id
        )
    except ValueError as exc:
        raise _raise_http(exc) from exc
    return _to_schema(NotificationView(notification=notification))


@router.get("/reminder", response_model=ReminderResponse)
def get_reminder(
    event: Event = Depends(get_event),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReminderResponse:
    view = get_event_reminder_uc(db, event=event)
    return ReminderResponse(
        reminder=_to_schema(view) if view is not None else None,
        is_organizer=event.is_organized_by(current_user.id),
    )


@router.put("/reminder", response_model=ReminderResponse)
def set_reminder(
    payload: ReminderUpdate,
    event: Event = Depends(get_event),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReminderResponse:
    """Create, replace or remove the reminder of the event."""

    require_organizer(event, current_user)
    try:
        reminder: Notification | None = set_event_reminder_uc(
            db,
            event=event,
            schedule_type=payload.schedule_type,
            hours_before=payload.hours_before_value,
            created_by=current_user.id,
        )
    except ValueError as exc:
        raise _raise_http(exc) from exc

    return ReminderResponse(
        reminder=_to_schema(NotificationView(notification=reminder)) if reminder else None,
        is_organizer=True,
    )
