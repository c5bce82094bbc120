class ProcessorError(Exception):
    """Base exception for category processing errors."""


class DeliveryError(ProcessorError):
    """Raised when the merged output cannot be moved to its destination."""
