"""Reusable field types and rule sets for route validation."""

from __future__ import annotations

from datetime import date
from typing import Annotated
from typing import Any
from uuid import UUID

from pydantic import AfterValidator
from pydantic import Field
from pydantic import StringConstraints

from lifetrack.core.validation import RuleSet

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
TIME_OF_DAY_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"

HexColor = Annotated[str, StringConstraints(pattern=HEX_COLOR_PATTERN)]
TimeOfDay = Annotated[str, StringConstraints(pattern=TIME_OF_DAY_PATTERN)]
IsoDateString = Annotated[str, StringConstraints(pattern=ISO_DATE_PATTERN)]
NonEmptyId = Annotated[str, StringConstraints(min_length=1)]
Metadata = dict[str, Any]


def _future_date(value: str) -> str:
    if date.fromisoformat(value) <= date.today():
        raise ValueError("Date must be in the future")
    return value


def _past_or_present_date(value: str) -> str:
    if date.fromisoformat(value) > date.today():
        raise ValueError("Date cannot be in the future")
    return value


FutureDate = Annotated[IsoDateString, AfterValidator(_future_date)]
PastOrPresentDate = Annotated[IsoDateString, AfterValidator(_past_or_present_date)]


class PaginationQuery(RuleSet):
    limit: int = Field(default=20, ge=1, le=100)
    page: int = Field(default=1, ge=1)


class IdParams(RuleSet):
    id: UUID


class LooseIdParams(RuleSet):
    id: NonEmptyId
