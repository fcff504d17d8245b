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


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class InvalidStateError(AppError):
    """Raised when an operation is not allowed in the resource's current state."""

    def __init__(self, message="Invalid state."):
        """Initialize the error."""
        super().__init__(message, 409)


class PersistenceError(AppError):
    """Raised when a store call fails unexpectedly."""

    def __init__(self, message="A database error occurred."):
        """Initialize the error."""
        super().__init__(message, 500)
