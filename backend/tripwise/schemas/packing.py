import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from tripwise.models.enums import PackingPriority


class PackingCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    display_order: int | None = None


class PackingCategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    display_order: int | None = None


class PackingItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    priority: PackingPriority = PackingPriority.NORMAL
    display_order: int | None = None


class PackingItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    is_packed: bool | None = None
    priority: PackingPriority | None = None
    display_order: int | None = None


class PackingItemResponse(BaseModel):
    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    is_packed: bool
    priority: PackingPriority
    display_order: int
    created_at: datetime

    model_config = {"from_attributes": True}


class PackingCategoryResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    name: str
    display_order: int
    items: list[PackingItemResponse]
    created_at: datetime

    model_config = {"from_attributes": True}


class PackingStats(BaseModel):
    total_items: int
    packed_items: int
    percentage: int


class PackingListResponse(BaseModel):
    categories: list[PackingCategoryResponse]
    stats: PackingStats
