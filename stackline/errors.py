"""
Typed application errors.

Services raise these; the API layer turns them into the error envelope
(see stackline.api.responses). The HTTP status carries the error kind.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to a client-facing HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    """Bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    """Entity is visible but the caller lacks the privilege."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    """
    Entity is absent, or invisible to the caller.

    The two cases are indistinguishable to clients.
    """

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Uniqueness violation."""

    status_code = status.HTTP_409_CONFLICT


class DuplicateRecordError(ConflictError):
    """Raised by repositories when the store rejects a row on a unique constraint."""

    def __init__(self, message: str = "Record already exists"):
        super().__init__(message)
