"""Rule sets for life area routes."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import ConfigDict
from pydantic import Field

from lifetrack.core.request_validation import ValidationSchema
from lifetrack.core.validation import RuleSet
from lifetrack.schemas.common import HexColor
from lifetrack.schemas.common import IdParams
from lifetrack.schemas.common import Metadata

LifeAreaType = Literal[
    "health",
    "finance",
    "learning",
    "work",
    "goals",
    "productivity",
    "relationships",
    "hobbies",
    "personal_growth",
    "custom",
]


class LifeAreaCreateBody(RuleSet):
    """Payload to create a life area; unrecognized keys are kept for the handler."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1, max_length=255)
    type: LifeAreaType
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=100)
    color: HexColor | None = None
    configuration: Metadata | None = None
    sort_order: int | None = Field(default=None, ge=0)


class LifeAreaUpdateBody(RuleSet):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: LifeAreaType | None = None
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=100)
    color: HexColor | None = None
    configuration: Metadata | None = None
    is_active: bool | None = None
    sort_order: int | None = Field(default=None, ge=0)


class LifeAreaListQuery(RuleSet):
    is_active: bool | None = None
    type: LifeAreaType | None = None


class LifeAreaOrder(RuleSet):
    id: UUID
    sort_order: int = Field(ge=0)


class LifeAreaReorderBody(RuleSet):
    life_area_orders: list[LifeAreaOrder] = Field(min_length=1)


CREATE_LIFE_AREA = ValidationSchema(body=LifeAreaCreateBody)
UPDATE_LIFE_AREA = ValidationSchema(body=LifeAreaUpdateBody, params=IdParams)
GET_LIFE_AREA = ValidationSchema(params=IdParams)
LIST_LIFE_AREAS = ValidationSchema(query=LifeAreaListQuery)
REORDER_LIFE_AREAS = ValidationSchema(body=LifeAreaReorderBody)
