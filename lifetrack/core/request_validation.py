"""Route-level request validation gate.

``validate_request`` turns a :class:`ValidationSchema` into a FastAPI
dependency. Facets are checked in the order body, query, params. Each facet is
validated exhaustively, but the first failing facet aborts the request, so a
single error response never mixes violations from different facets.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from pydantic import BaseModel

from lifetrack.core.errors import ValidationError
from lifetrack.core.validation import validate_facet
from lifetrack.schemas.envelope import FieldViolation

logger = logging.getLogger(__name__)

BODY_FAILURE_MESSAGE = "Request validation failed"
QUERY_FAILURE_MESSAGE = "Query parameter validation failed"
PARAMS_FAILURE_MESSAGE = "Path parameter validation failed"


@dataclass(frozen=True)
class ValidationSchema:
    """Per-route rule sets; a ``None`` facet is passed through unchecked."""

    body: type[BaseModel] | None = None
    query: type[BaseModel] | None = None
    params: type[BaseModel] | None = None


@dataclass(frozen=True)
class ValidatedRequest:
    """Sanitized request facets handed to the route handler."""

    body: dict[str, Any] | None
    query: dict[str, Any]
    params: dict[str, Any]


def _field_errors(violations: list[FieldViolation]) -> dict[str, Any]:
    return {"field_errors": [violation.model_dump() for violation in violations]}


async def _read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as exc:
        violation = FieldViolation(field="body", message=f"Malformed JSON body: {exc}", type="json_invalid")
        raise ValidationError(BODY_FAILURE_MESSAGE, details=_field_errors([violation])) from exc


def _query_mapping(request: Request) -> dict[str, Any]:
    """Collect query parameters; repeated keys keep every value as a list."""
    collected: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        collected.setdefault(key, []).append(value)
    return {key: values[0] if len(values) == 1 else values for key, values in collected.items()}


def _run_stage(rules: type[BaseModel], candidate: Any, *, facet: str, message: str) -> dict[str, Any]:
    result = validate_facet(rules, candidate, facet=facet)
    if not result.ok:
        logger.debug("Rejected %s facet with %d violation(s)", facet, len(result.violations))
        raise ValidationError(message, details=_field_errors(result.violations))
    return result.value or {}


def validate_request(schema: ValidationSchema) -> Callable[[Request], Awaitable[ValidatedRequest]]:
    """Build a dependency that validates and sanitizes the configured facets."""

    async def dependency(request: Request) -> ValidatedRequest:
        body: dict[str, Any] | None = None
        query: dict[str, Any] = _query_mapping(request)
        params: dict[str, Any] = dict(request.path_params)

        if schema.body is not None:
            body = _run_stage(
                schema.body,
                await _read_json_body(request),
                facet="body",
                message=BODY_FAILURE_MESSAGE,
            )
        if schema.query is not None:
            query = _run_stage(schema.query, query, facet="query", message=QUERY_FAILURE_MESSAGE)
        if schema.params is not None:
            params = _run_stage(schema.params, params, facet="params", message=PARAMS_FAILURE_MESSAGE)

        validated = ValidatedRequest(body=body, query=query, params=params)
        request.state.validated = validated
        return validated

    return dependency
