class NotificationError(RuntimeError):
    """Raised when an outbound email or webhook delivery fails."""


class NotificationNotConfiguredError(NotificationError):
    """Raised when a delivery channel is missing its credentials or endpoint."""
