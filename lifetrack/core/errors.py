"""API error taxonomy shared by handlers, validators and the failure classifier."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import status


class APIError(Exception):
    """Base application exception for explicit API error responses.

    Subclasses fix ``code`` and ``status_code``; ``public_message`` is set on
    kinds whose raiser-supplied text must never reach the client.
    """

    code: str = "INTERNAL_SERVER_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"
    public_message: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = dict(details) if details else None

    @property
    def client_message(self) -> str:
        """Message that is safe to return in the response envelope."""
        return self.public_message or self.message


class ValidationError(APIError):
    """Input failed schema validation."""

    code = "VALIDATION_ERROR"
    status_code = 422
    default_message = "Invalid input data"


class UnprocessableEntityError(APIError):
    """Input is well-formed but semantically invalid."""

    code = "VALIDATION_FAILED"
    status_code = 422
    default_message = "Semantic validation failed"


class UnauthorizedError(APIError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"
    public_message = "Authentication required"


class ForbiddenError(APIError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"
    public_message = "Access denied"


class NotFoundError(APIError):
    """Convenience exception for missing resources."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
    public_message = "Resource not found"


class ConflictError(APIError):
    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"
    public_message = "Resource conflict"


class DuplicateResourceError(APIError):
    """Unique constraint violated in the backing store."""

    code = "DUPLICATE_RESOURCE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InvalidReferenceError(APIError):
    """Foreign key constraint violated in the backing store."""

    code = "INVALID_REFERENCE"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid reference to related resource"


class MissingRequiredFieldError(APIError):
    """Not-null constraint violated in the backing store."""

    code = "MISSING_REQUIRED_FIELD"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Required field is missing"


class ConstraintViolationError(APIError):
    """Check constraint violated in the backing store."""

    code = "CONSTRAINT_VIOLATION"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Data constraint violation"


class InvalidTokenError(APIError):
    code = "INVALID_TOKEN"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid authentication token"


class TokenExpiredError(APIError):
    code = "TOKEN_EXPIRED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication token has expired"


class InternalError(APIError):
    """Unclassified failure, correlated with server logs by ``incident_id``."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, incident_id: str) -> None:
        super().__init__(message)
        self.incident_id = incident_id
