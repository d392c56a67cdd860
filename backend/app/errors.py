"""
Domain exceptions.

Services raise these; the handlers registered in app.main render them as
JSON bodies of the form {"message": ..., "errors": [...]}.
"""

from typing import Any

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred."

    def __init__(self, message: str | None = None, *, errors: list[Any] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class ValidationError(AppError):
    """Malformed or semantically invalid input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    @property
    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppError):
    """Caller's role or ownership does not allow the action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(AppError):
    pass


class ServiceUnavailableError(AppError):
    """A backing service is not configured or not reachable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service unavailable"
