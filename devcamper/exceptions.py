"""Application exception hierarchy.

Every error raised by the service layer carries the HTTP status code and the
human-readable message that end up in the ``{"success": false, "message": ...}``
error envelope.
"""

from fastapi import status


class AppError(Exception):
    """Base exception for all DevCamper API errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None):
        """Initialize the exception.

        Args:
            message: User-facing message; falls back to the class default.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when a record violates a schema or uniqueness constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class BadRequest(AppError):
    """Raised when required request fields are missing."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class InvalidCredentials(AppError):
    """Raised when login fails. Same message for unknown email and bad password."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Unauthorized(AppError):
    """Raised when the caller is not allowed to perform a credential change."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class InvalidToken(AppError):
    """Raised when a session token fails signature, expiry or payload checks."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class InvalidOrExpiredToken(AppError):
    """Raised when a password reset token is unknown or past its expiry."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid token"


class EmailDeliveryError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Email could not be sent"
