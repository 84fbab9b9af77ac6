from .notification import (
    DispatchResultRead,
    DispatchSummaryRead,
    NotificationCreate,
    NotificationListResponse,
    NotificationRead,
    RecipientRead,
    ReminderResponse,
    ReminderUpdate,
    WebhookAck,
)

__all__ = [
    "DispatchResultRead",
    "DispatchSummaryRead",
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationRead",
    "RecipientRead",
    "ReminderResponse",
    "ReminderUpdate",
    "WebhookAck",
]
