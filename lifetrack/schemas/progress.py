"""Rule sets for progress entry routes."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AnyUrl
from pydantic import ConfigDict
from pydantic import Field

from lifetrack.core.request_validation import ValidationSchema
from lifetrack.core.validation import RuleSet
from lifetrack.schemas.common import LooseIdParams
from lifetrack.schemas.common import Metadata
from lifetrack.schemas.common import NonEmptyId
from lifetrack.schemas.common import PaginationQuery
from lifetrack.schemas.common import PastOrPresentDate

DataSource = Literal[
    "manual",
    "apple_health",
    "apple_calendar",
    "apple_reminders",
    "api_integration",
    "ai_automation",
    "file_import",
]


class Attachment(RuleSet):
    type: Literal["image", "document", "link"]
    url: AnyUrl
    name: str | None = Field(default=None, max_length=255)


class ProgressCreateBody(RuleSet):
    """Payload to log progress against a goal; unrecognized keys are kept."""

    model_config = ConfigDict(extra="allow")

    entry_date: PastOrPresentDate
    value: float | None = None
    notes: str | None = Field(default=None, max_length=1000)
    data_source: DataSource | None = None
    metadata: Metadata | None = None
    attachments: list[Attachment] | None = None


class ProgressUpdateBody(RuleSet):
    entry_date: PastOrPresentDate | None = None
    value: float | None = None
    notes: str | None = Field(default=None, max_length=1000)
    data_source: DataSource | None = None
    metadata: Metadata | None = None
    attachments: list[Attachment] | None = None


class GoalIdParams(RuleSet):
    goal_id: NonEmptyId


class ProgressByGoalQuery(PaginationQuery):
    start_date: datetime | None = None
    end_date: datetime | None = None


CREATE_PROGRESS_ENTRY = ValidationSchema(body=ProgressCreateBody, params=GoalIdParams)
UPDATE_PROGRESS_ENTRY = ValidationSchema(body=ProgressUpdateBody, params=LooseIdParams)
GET_PROGRESS_ENTRY = ValidationSchema(params=LooseIdParams)
LIST_PROGRESS_FOR_GOAL = ValidationSchema(query=ProgressByGoalQuery, params=GoalIdParams)
DELETE_PROGRESS_ENTRY = ValidationSchema(params=LooseIdParams)
