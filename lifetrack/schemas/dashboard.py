"""Rule sets for dashboard routes."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from lifetrack.core.request_validation import ValidationSchema
from lifetrack.core.validation import RuleSet
from lifetrack.schemas.common import Metadata


class DashboardStatsQuery(RuleSet):
    time_range: Literal["week", "month", "quarter", "year"] = "week"


class WidgetPosition(RuleSet):
    x: int = Field(ge=0)
    y: int = Field(ge=0)


class Widget(RuleSet):
    id: str
    type: Literal["chart", "metric", "list", "progress"]
    position: WidgetPosition
    config: Metadata | None = None


class WidgetsUpdateBody(RuleSet):
    widgets: list[Widget] = Field(min_length=1)


GET_DASHBOARD_STATS = ValidationSchema(query=DashboardStatsQuery)
UPDATE_DASHBOARD_WIDGETS = ValidationSchema(body=WidgetsUpdateBody)
