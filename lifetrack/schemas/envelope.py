"""Response envelope schemas shared by every API route."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import model_validator


class FieldViolation(BaseModel):
    """Single field-level validation failure."""

    field: str
    message: str
    type: str


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    code: str
    message: str
    details: dict[str, Any] | None = None
    incident_id: str | None = None


class ResponseMeta(BaseModel):
    timestamp: str
    request_id: str


class ResponseEnvelope(BaseModel):
    """Top-level envelope for both success and failure responses."""

    success: bool
    data: Any = None
    error: ErrorObject | None = None
    meta: ResponseMeta | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "ResponseEnvelope":
        if self.success and self.error is not None:
            raise ValueError("successful envelopes cannot carry an error")
        if not self.success and (self.error is None or self.data is not None):
            raise ValueError("failed envelopes carry an error and no data")
        return self

    def to_payload(self) -> dict[str, Any]:
        """Serialize with exactly one of ``data``/``error`` present."""
        payload: dict[str, Any] = {"success": self.success}
        if self.success:
            payload["data"] = self.data
        else:
            payload["error"] = self.error.model_dump(exclude_none=True)
        if self.meta is not None:
            payload["meta"] = self.meta.model_dump()
        return payload
