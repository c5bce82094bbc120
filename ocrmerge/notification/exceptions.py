class NotificationError(Exception):
    """Raised when an operator notice cannot be sent."""
