"""Rule sets for goal routes."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from typing import Literal
from uuid import UUID

from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationInfo
from pydantic import field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from lifetrack.core.request_validation import ValidationSchema
from lifetrack.core.validation import RuleSet
from lifetrack.schemas.common import FutureDate
from lifetrack.schemas.common import IdParams
from lifetrack.schemas.common import IsoDateString
from lifetrack.schemas.common import Metadata
from lifetrack.schemas.common import PaginationQuery
from lifetrack.schemas.common import TimeOfDay

GoalType = Literal["numeric", "habit", "milestone", "binary", "custom"]
GoalStatus = Literal["active", "completed", "paused", "cancelled", "archived"]
ReminderFrequency = Literal["daily", "weekly", "monthly"]


class ReminderConfig(RuleSet):
    enabled: bool = False
    frequency: ReminderFrequency | None = None
    time: TimeOfDay | None = None


class ReminderConfigUpdate(RuleSet):
    enabled: bool | None = None
    frequency: ReminderFrequency | None = None
    time: TimeOfDay | None = None


class GoalCreateBody(RuleSet):
    """Payload to create a goal.

    Numeric goals must state both ``targetValue`` and ``targetUnit``.
    """

    model_config = ConfigDict(extra="allow")

    life_area_id: UUID
    parent_goal_id: UUID | None = None
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    goal_type: GoalType
    target_value: float | None = None
    target_unit: str | None = Field(default=None, max_length=50)
    deadline: FutureDate | None = None
    priority: int = Field(default=3, ge=1, le=5)
    metadata: Metadata | None = None
    reminder_config: ReminderConfig | None = None

    @field_validator("target_value", "target_unit")
    @classmethod
    def _require_numeric_target(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.data.get("goal_type") == "numeric":
            raise PydanticCustomError(
                "numeric_target_required",
                "{field} is required for numeric goals",
                {"field": to_camel(info.field_name)},
            )
        return value


class GoalUpdateBody(RuleSet):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    target_value: float | None = None
    target_unit: str | None = Field(default=None, max_length=50)
    deadline: FutureDate | None = None
    priority: int | None = Field(default=None, ge=1, le=5)
    status: GoalStatus | None = None
    metadata: Metadata | None = None
    reminder_config: ReminderConfigUpdate | None = None


class GoalListQuery(PaginationQuery):
    life_area_id: UUID | None = None
    status: GoalStatus | None = None
    goal_type: GoalType | None = None
    deadline_before: IsoDateString | None = None


class GoalProgressBody(RuleSet):
    progress: float = Field(ge=0)
    notes: str | None = Field(default=None, max_length=1000)
    timestamp: datetime | None = None


CREATE_GOAL = ValidationSchema(body=GoalCreateBody)
UPDATE_GOAL = ValidationSchema(body=GoalUpdateBody, params=IdParams)
GET_GOAL = ValidationSchema(params=IdParams)
LIST_GOALS = ValidationSchema(query=GoalListQuery)
DELETE_GOAL = ValidationSchema(params=IdParams)
UPDATE_GOAL_PROGRESS = ValidationSchema(body=GoalProgressBody, params=IdParams)
