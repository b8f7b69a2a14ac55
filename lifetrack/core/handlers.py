"""Terminal failure classifier and exception handler registration.

Every failure that escapes a route ends here. ``classify_exception`` maps it to
exactly one taxonomy entry, checking in this order:

1. explicit :class:`APIError` raised by handlers or validators,
2. backing-store constraint violations (by SQLSTATE code),
3. token errors raised by PyJWT,
4. anything else, reported as :class:`InternalError` with an incident id.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Any

import jwt
import psycopg
from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from lifetrack.core.config import AppSettings
from lifetrack.core.config import get_settings
from lifetrack.core.errors import APIError
from lifetrack.core.errors import ConflictError
from lifetrack.core.errors import ConstraintViolationError
from lifetrack.core.errors import DuplicateResourceError
from lifetrack.core.errors import ForbiddenError
from lifetrack.core.errors import InternalError
from lifetrack.core.errors import InvalidReferenceError
from lifetrack.core.errors import InvalidTokenError
from lifetrack.core.errors import MissingRequiredFieldError
from lifetrack.core.errors import NotFoundError
from lifetrack.core.errors import TokenExpiredError
from lifetrack.core.errors import UnauthorizedError
from lifetrack.core.errors import ValidationError
from lifetrack.core.request_validation import BODY_FAILURE_MESSAGE
from lifetrack.core.request_validation import PARAMS_FAILURE_MESSAGE
from lifetrack.core.request_validation import QUERY_FAILURE_MESSAGE
from lifetrack.core.responses import error_response
from lifetrack.core.responses import get_request_id
from lifetrack.core.validation import violations_from_errors

logger = logging.getLogger(__name__)

PRODUCTION_INTERNAL_MESSAGE = "Internal server error"
DEVELOPMENT_INTERNAL_MESSAGE = "An unexpected error occurred"

INCIDENT_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
INCIDENT_SUFFIX_LENGTH = 9

LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})
LOCATION_MESSAGES = {
    "query": QUERY_FAILURE_MESSAGE,
    "path": PARAMS_FAILURE_MESSAGE,
}

CONSTRAINT_ERRORS: dict[str, type[APIError]] = {
    "23505": DuplicateResourceError,
    "23503": InvalidReferenceError,
    "23502": MissingRequiredFieldError,
    "23514": ConstraintViolationError,
}

HTTP_STATUS_ERRORS: dict[int, type[APIError]] = {
    status.HTTP_401_UNAUTHORIZED: UnauthorizedError,
    status.HTTP_403_FORBIDDEN: ForbiddenError,
    status.HTTP_404_NOT_FOUND: NotFoundError,
    status.HTTP_409_CONFLICT: ConflictError,
}


def new_incident_id() -> str:
    """Return an ``inc_<epoch-ms>_<random>`` correlator for unclassified failures."""
    suffix = "".join(secrets.choice(INCIDENT_SUFFIX_ALPHABET) for _ in range(INCIDENT_SUFFIX_LENGTH))
    return f"inc_{int(time.time() * 1000)}_{suffix}"


def constraint_code(exc: BaseException) -> str | None:
    """Return the SQLSTATE carried by a database driver error, if any."""
    if isinstance(exc, DBAPIError):
        driver_error: Any = exc.orig
    elif isinstance(exc, psycopg.Error):
        driver_error = exc
    else:
        return None
    code = getattr(driver_error, "sqlstate", None) or getattr(driver_error, "pgcode", None)
    return str(code) if code else None


def classify_exception(exc: BaseException) -> APIError:
    """Map any failure to a single taxonomy entry; first match wins.

    An explicit :class:`APIError` is used as raised unless it is a server
    failure other than :class:`InternalError`; those get an incident id so
    their text never reaches the client.
    """
    if isinstance(exc, APIError):
        if isinstance(exc, InternalError) or exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
            return exc
        return InternalError(incident_id=new_incident_id())

    code = constraint_code(exc)
    if code in CONSTRAINT_ERRORS:
        return CONSTRAINT_ERRORS[code]()

    if isinstance(exc, jwt.ExpiredSignatureError):
        return TokenExpiredError()
    if isinstance(exc, jwt.InvalidTokenError):
        return InvalidTokenError()

    return InternalError(incident_id=new_incident_id())


def _strip_location_prefix(location: Any) -> tuple[Any, ...]:
    parts = tuple(location) if isinstance(location, (tuple, list)) else (location,)
    if parts and parts[0] in LOCATION_PREFIXES:
        return parts[1:]
    return parts


def _validation_message(issues: list[dict[str, Any]]) -> str:
    location = issues[0].get("loc", ()) if issues else ()
    prefix = location[0] if isinstance(location, (tuple, list)) and location else None
    return LOCATION_MESSAGES.get(prefix, BODY_FAILURE_MESSAGE)


def _settings_for(request: Request) -> AppSettings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _client_message(error: APIError, settings: AppSettings) -> str:
    if isinstance(error, InternalError):
        return PRODUCTION_INTERNAL_MESSAGE if settings.is_production else DEVELOPMENT_INTERNAL_MESSAGE
    return error.client_message


def _log_failure(request: Request, exc: BaseException, error: APIError) -> None:
    incident_id = getattr(error, "incident_id", None)
    if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Unhandled error: %s %s -> %s %s incident_id=%s request_id=%s: %s",
            request.method,
            request.url.path,
            error.status_code,
            error.code,
            incident_id,
            get_request_id(request),
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return
    logger.warning(
        "Request failed: %s %s -> %s %s request_id=%s: %s",
        request.method,
        request.url.path,
        error.status_code,
        error.code,
        get_request_id(request),
        exc,
    )


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """Classify ``exc``, log it once, and write the error envelope."""
    error = classify_exception(exc)
    _log_failure(request, exc, error)

    if isinstance(error, InternalError):
        return error_response(
            status_code=error.status_code,
            code=error.code,
            message=_client_message(error, _settings_for(request)),
            incident_id=error.incident_id,
            request=request,
        )
    return error_response(
        status_code=error.status_code,
        code=error.code,
        message=_client_message(error, _settings_for(request)),
        details=error.details,
        request=request,
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI's own parameter validation to the taxonomy."""
    raw_issues = list(exc.errors())
    issues = [
        {**issue, "loc": _strip_location_prefix(issue.get("loc", ()))}
        for issue in raw_issues
    ]
    violations = violations_from_errors(issues, facet="request")
    error = ValidationError(
        _validation_message(raw_issues),
        details={"field_errors": [violation.model_dump() for violation in violations]},
    )
    return await handle_exception(request, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize framework HTTP exceptions (unmatched routes, 405s) to the envelope."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and "endpoint" not in request.scope:
        logger.warning("Endpoint not found: %s %s", request.method, request.url.path)
        return error_response(
            status_code=exc.status_code,
            code="NOT_FOUND",
            message=f"Endpoint {request.method} {request.url.path} not found",
            request=request,
        )

    kind = HTTP_STATUS_ERRORS.get(exc.status_code)
    if kind is not None:
        return await handle_exception(request, kind(str(exc.detail)))

    logger.warning("HTTP error: %s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return error_response(
        status_code=exc.status_code,
        code=_http_error_code(exc.status_code),
        message=str(exc.detail) if exc.detail else "Request failed",
        request=request,
    )


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "METHOD_NOT_ALLOWED"
    if status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        return "RATE_LIMITED"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "INTERNAL_SERVER_ERROR"
    return "BAD_REQUEST"


def register_error_handlers(app: FastAPI, settings: AppSettings | None = None) -> None:
    """Attach the failure classifier to a FastAPI app instance."""
    app.state.settings = settings or get_settings()

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    for failure_type in (APIError, DBAPIError, psycopg.Error, jwt.InvalidTokenError, Exception):
        app.add_exception_handler(failure_type, handle_exception)
