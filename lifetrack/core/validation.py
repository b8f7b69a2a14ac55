"""Schema-driven validation of one request facet.

A rule set is a pydantic model class deriving from :class:`RuleSet`. Running
it against a candidate value either yields the sanitized value (unknown fields
stripped, defaults applied, types coerced) or every failing rule as an ordered
list of :class:`FieldViolation`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from lifetrack.schemas.envelope import FieldViolation


class RuleSet(BaseModel):
    """Base class for facet rule sets.

    Unknown fields are stripped. Rule sets that must keep them declare
    ``model_config = ConfigDict(extra="allow")`` on the subclass.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


@dataclass(frozen=True)
class FacetResult:
    """Outcome of validating a single facet."""

    value: dict[str, Any] | None = None
    violations: list[FieldViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


def _format_location(location: Sequence[Any], facet: str) -> str:
    if not location:
        return facet
    return ".".join(str(part) for part in location)


def violations_from_errors(errors: Sequence[dict[str, Any]], *, facet: str) -> list[FieldViolation]:
    """Convert pydantic error dicts to field violations, keeping their order."""
    return [
        FieldViolation(
            field=_format_location(error.get("loc", ()), facet),
            message=str(error.get("msg", "Invalid value")),
            type=str(error.get("type", "value_error")),
        )
        for error in errors
    ]


def _dump_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return sanitized_value(value)
    if isinstance(value, list):
        return [_dump_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump_value(item) for key, item in value.items()}
    return value


def sanitized_value(model: BaseModel) -> dict[str, Any]:
    """Dump a validated model by wire name.

    Optional fields the client left out stay absent; fields with a default
    are always present.
    """
    data: dict[str, Any] = {}
    for name, info in type(model).model_fields.items():
        absent_optional = (
            name not in model.model_fields_set
            and info.default is None
            and info.default_factory is None
        )
        if absent_optional:
            continue
        data[info.alias or name] = _dump_value(getattr(model, name))
    if model.model_extra:
        data.update(model.model_extra)
    return data


def validate_facet(rules: type[BaseModel], candidate: Any, *, facet: str = "body") -> FacetResult:
    """Evaluate every rule of ``rules`` against ``candidate``.

    Validation is exhaustive: all failing rules are reported, not only the
    first one.
    """
    try:
        model = rules.model_validate({} if candidate is None else candidate)
    except PydanticValidationError as exc:
        return FacetResult(
            violations=violations_from_errors(exc.errors(include_url=False), facet=facet),
        )
    return FacetResult(value=sanitized_value(model))
