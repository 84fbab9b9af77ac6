"""Use cases for scheduling and sending SMS event notifications."""

from .delivery import handle_inbound_sms, map_delivery_status, record_delivery_status
from .dispatch import (
    DispatchSummary,
    NotificationDispatchResult,
    dispatch_due_notifications,
    process_notification,
    resolve_recipients,
)
from .errors import (
    NotificationNotFoundError,
    NotificationStateError,
    NotificationValidationError,
)
from .manage import (
    NotificationView,
    cancel_notification,
    create_notification,
    get_event_reminder,
    list_event_notifications,
    set_event_reminder,
)
from .messages import build_notification_message
from .scheduling import compute_fire_time, validate_fire_time

__all__ = [
    "DispatchSummary",
    "NotificationDispatchResult",
    "NotificationNotFoundError",
    "NotificationStateError",
    "NotificationValidationError",
    "NotificationView",
    "build_notification_message",
    "cancel_notification",
    "compute_fire_time",
    "create_notification",
    "dispatch_due_notifications",
    "get_event_reminder",
    "handle_inbound_sms",
    "list_event_notifications",
    "map_delivery_status",
    "process_notification",
    "record_delivery_status",
    "resolve_recipients",
    "set_event_reminder",
    "validate_fire_time",
]
