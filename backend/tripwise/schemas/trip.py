import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field


class TripCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    destination_city: str | None = None
    destination_country: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    notes: str | None = None


class TripUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    destination_city: str | None = None
    destination_country: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    notes: str | None = None


class TripResponse(BaseModel):
    id: uuid.UUID
    title: str
    destination_city: str | None
    destination_country: str | None
    start_date: date | None
    end_date: date | None
    currency: str
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TravelerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    email: str | None = None
    relation: str | None = None
    is_primary: bool = False
    is_cost_sharer: bool = True
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    is_active: bool = True


class TravelerUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    email: str | None = None
    relation: str | None = None
    is_primary: bool | None = None
    is_cost_sharer: bool | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    is_active: bool | None = None


class TravelerResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    name: str
    email: str | None
    relation: str | None
    is_primary: bool
    is_cost_sharer: bool
    currency: str | None
    is_active: bool

    model_config = {"from_attributes": True}
