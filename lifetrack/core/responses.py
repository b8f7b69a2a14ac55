"""Response envelope writer used for both success and failure responses."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone
from typing import Any

from fastapi import Request
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from lifetrack.schemas.envelope import ErrorObject
from lifetrack.schemas.envelope import ResponseEnvelope
from lifetrack.schemas.envelope import ResponseMeta

UNKNOWN_REQUEST_ID = "unknown"


def get_request_id(request: Request | None) -> str:
    """Return the upstream-assigned request id, or ``"unknown"``."""
    if request is None:
        return UNKNOWN_REQUEST_ID
    return getattr(request.state, "request_id", None) or UNKNOWN_REQUEST_ID


def build_meta(request: Request | None) -> ResponseMeta:
    return ResponseMeta(
        timestamp=datetime.now(timezone.utc).isoformat(),
        request_id=get_request_id(request),
    )


def _render(envelope: ResponseEnvelope, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope.to_payload()))


def success_response(
    data: Any,
    *,
    request: Request | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Wrap handler output in the success envelope."""
    envelope = ResponseEnvelope(success=True, data=data, meta=build_meta(request))
    return _render(envelope, status_code)


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    incident_id: str | None = None,
    request: Request | None = None,
) -> JSONResponse:
    """Render an already-classified failure in the error envelope."""
    error = ErrorObject(code=code, message=message, details=details, incident_id=incident_id)
    envelope = ResponseEnvelope(success=False, error=error, meta=build_meta(request))
    return _render(envelope, status_code)
