import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, Field

from tripwise.models.enums import CostType


class DayCreate(BaseModel):
    day_number: int = Field(ge=1)
    day_date: date
    description: str | None = None


class DayUpdate(BaseModel):
    day_date: date | None = None
    description: str | None = None


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    cost_type: CostType = CostType.TOTAL
    headcount: int | None = Field(default=None, ge=1)
    display_order: int | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    cost_type: CostType | None = None
    headcount: int | None = Field(default=None, ge=1)
    is_active: bool | None = None
    is_expanded: bool | None = None
    display_order: int | None = None


class ActivityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    start_time: time | None = None
    end_time: time | None = None
    duration_minutes: int | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    cost_type: CostType = CostType.TOTAL
    headcount: int | None = Field(default=None, ge=1)
    notes: str | None = None
    display_order: int | None = None


class ActivityUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    start_time: time | None = None
    end_time: time | None = None
    duration_minutes: int | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    cost_type: CostType | None = None
    headcount: int | None = Field(default=None, ge=1)
    notes: str | None = None
    display_order: int | None = None
    is_completed: bool | None = None


class ReorderRequest(BaseModel):
    ordered_ids: list[uuid.UUID] = Field(min_length=1)


class ActivityResponse(BaseModel):
    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    start_time: time | None
    end_time: time | None
    duration_minutes: int | None
    cost: float | None
    currency_code: str | None
    cost_type: CostType
    headcount: int | None
    notes: str | None
    display_order: int
    is_completed: bool

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    id: uuid.UUID
    day_id: uuid.UUID
    name: str
    cost: float | None
    currency_code: str | None
    cost_type: CostType
    headcount: int | None
    is_active: bool
    is_expanded: bool
    display_order: int
    activities: list[ActivityResponse]

    model_config = {"from_attributes": True}


class DayResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    day_number: int
    day_date: date
    description: str | None
    categories: list[CategoryResponse]
    created_at: datetime

    model_config = {"from_attributes": True}
