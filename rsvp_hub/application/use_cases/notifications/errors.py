"""Errors raised by the notification use cases."""


class NotificationValidationError(ValueError):
    """The requested schedule cannot be accepted."""


class NotificationNotFoundError(ValueError):
    """The notification does not exist for the given event."""


class NotificationStateError(ValueError):
    """The notification is no longer in a state that allows the change."""


__all__ = [
    "NotificationNotFoundError",
    "NotificationStateError",
    "NotificationValidationError",
]
