class NotificationError(Exception):
    """Raised when reminders cannot be delivered."""


class NotificationNetworkError(NotificationError):
    """Raised when the delivery endpoint is unreachable or answers with an error."""
