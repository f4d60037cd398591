import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, Field, model_validator

from tripwise.models.enums import FlightType, ItemStatus, LegDirection


class FlightLegBase(BaseModel):
    leg_order: int = Field(ge=1)
    departure_airport: str = Field(min_length=3, max_length=10)
    arrival_airport: str = Field(min_length=3, max_length=10)
    departure_date: date
    departure_time: time | None = None
    arrival_date: date
    arrival_time: time | None = None
    airline: str | None = None
    flight_number: str | None = None
    stops_count: int = Field(default=0, ge=0)
    duration_minutes: int | None = Field(default=None, ge=0)


class FlightLegResponse(FlightLegBase):
    id: uuid.UUID
    direction: LegDirection

    model_config = {"from_attributes": True}


class FlightOptionCreate(BaseModel):
    flight_type: FlightType = FlightType.ONE_WAY
    unit_fare: float | None = Field(default=None, ge=0)
    return_fare: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    status: ItemStatus = ItemStatus.DRAFT
    notes: str | None = None
    legs: list[FlightLegBase] = Field(min_length=1)
    return_legs: list[FlightLegBase] = []
    traveler_ids: list[uuid.UUID] = []

    @model_validator(mode="after")
    def _check_shape(self):
        if self.flight_type != FlightType.ROUND_TRIP:
            if self.return_legs:
                raise ValueError("return_legs are only allowed on round_trip flights")
            if self.return_fare is not None:
                raise ValueError("return_fare is only allowed on round_trip flights")
        elif not self.return_legs:
            raise ValueError("round_trip flights need return_legs")
        return self


class FlightOptionUpdate(BaseModel):
    unit_fare: float | None = Field(default=None, ge=0)
    return_fare: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    status: ItemStatus | None = None
    notes: str | None = None
    legs: list[FlightLegBase] | None = None
    return_legs: list[FlightLegBase] | None = None
    traveler_ids: list[uuid.UUID] | None = None


class FlightTravelerResponse(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class FlightOptionResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    flight_type: FlightType
    unit_fare: float | None
    return_fare: float | None
    currency_code: str | None
    status: ItemStatus
    notes: str | None
    outbound_legs: list[FlightLegResponse]
    return_legs: list[FlightLegResponse]
    travelers: list[FlightTravelerResponse]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
