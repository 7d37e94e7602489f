"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class PermissionDenied(AppError):
    """Raised when the access rules reject an operation.

    The wire surface is a single opaque message; ``reason`` is kept for logs.
    """

    def __init__(self, reason=None):
        """Initialize the error."""
        super().__init__("Permission denied.", 403)
        self.reason = reason


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class MalformedEventError(Exception):
    """Raised by a handler when its trigger payload lacks required fields.

    The dispatcher logs it and does not retry.
    """

    pass
