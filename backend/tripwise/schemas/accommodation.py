import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, Field

from tripwise.models.enums import ItemStatus


class AccommodationFields(BaseModel):
    type_name: str | None = None
    name: str | None = None
    address: str | None = None
    location: str | None = None
    check_in_date: date | None = None
    check_in_time: time | None = None
    check_out_date: date | None = None
    check_out_time: time | None = None
    num_rooms: int | None = Field(default=None, ge=1)
    price_per_night: float | None = Field(default=None, ge=0)
    total_price: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    status: ItemStatus | None = None
    booking_reference: str | None = None
    booking_source: str | None = None
    notes: str | None = None
    traveler_ids: list[uuid.UUID] | None = None


class AccommodationCreate(AccommodationFields):
    num_rooms: int = Field(default=1, ge=1)
    status: ItemStatus = ItemStatus.DRAFT


class AccommodationUpdate(AccommodationFields):
    pass


class AccommodationTravelerResponse(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class AccommodationResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    type_name: str | None
    name: str | None
    address: str | None
    location: str | None
    check_in_date: date | None
    check_in_time: time | None
    check_out_date: date | None
    check_out_time: time | None
    nights: int | None
    num_rooms: int
    price_per_night: float | None
    total_price: float | None
    currency_code: str | None
    status: ItemStatus
    booking_reference: str | None
    booking_source: str | None
    notes: str | None
    travelers: list[AccommodationTravelerResponse]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
