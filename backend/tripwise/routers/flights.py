import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.dependencies import get_trip
from tripwise.models.enums import FlightType, ItemStatus, LegDirection
from tripwise.models.flight import FlightLeg, FlightOption
from tripwise.models.trip import Trip
from tripwise.routers.common import currency_code, money, resolve_travelers
from tripwise.schemas.flight import (
    FlightLegBase,
    FlightOptionCreate,
    FlightOptionResponse,
    FlightOptionUpdate,
)

router = APIRouter()


def _build_legs(legs: list[FlightLegBase], direction: LegDirection) -> list[FlightLeg]:
    for leg in legs:
        if leg.arrival_date < leg.departure_date:
            raise HTTPException(
                status_code=400,
                detail=f"Leg {leg.leg_order} arrives before it departs",
            )
    return [
        FlightLeg(
            direction=direction,
            **{
                **leg.model_dump(),
                "departure_airport": leg.departure_airport.upper(),
                "arrival_airport": leg.arrival_airport.upper(),
            },
        )
        for leg in sorted(legs, key=lambda l: l.leg_order)
    ]


async def _get_option(db: AsyncSession, trip_id: uuid.UUID, flight_id: uuid.UUID) -> FlightOption:
    result = await db.execute(
        select(FlightOption).where(FlightOption.id == flight_id, FlightOption.trip_id == trip_id)
    )
    option = result.scalar_one_or_none()
    if not option:
        raise HTTPException(status_code=404, detail="Flight option not found")
    return option


@router.get("/{trip_id}/flights", response_model=list[FlightOptionResponse])
async def list_flights(
    status: ItemStatus | None = None,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    query = select(FlightOption).where(FlightOption.trip_id == trip.id)
    if status:
        query = query.where(FlightOption.status == status)
    result = await db.execute(query.order_by(FlightOption.created_at, FlightOption.id))
    return [FlightOptionResponse.model_validate(f) for f in result.scalars().all()]


@router.post("/{trip_id}/flights", status_code=201, response_model=FlightOptionResponse)
async def create_flight(
    req: FlightOptionCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    """Create a flight option. Round trips carry their return legs on the same option."""
    option = FlightOption(
        trip_id=trip.id,
        flight_type=req.flight_type,
        unit_fare=money(req.unit_fare),
        return_fare=money(req.return_fare),
        currency_code=currency_code(req.currency_code),
        status=req.status,
        notes=req.notes,
    )
    option.legs = _build_legs(req.legs, LegDirection.OUTBOUND) + _build_legs(req.return_legs, LegDirection.RETURN)
    option.travelers = await resolve_travelers(db, trip.id, req.traveler_ids)

    db.add(option)
    await db.commit()
    await db.refresh(option)
    return FlightOptionResponse.model_validate(option)


@router.get("/{trip_id}/flights/{flight_id}", response_model=FlightOptionResponse)
async def get_flight(
    flight_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    return FlightOptionResponse.model_validate(await _get_option(db, trip.id, flight_id))


@router.put("/{trip_id}/flights/{flight_id}", response_model=FlightOptionResponse)
async def update_flight(
    flight_id: uuid.UUID,
    req: FlightOptionUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    option = await _get_option(db, trip.id, flight_id)
    changes = req.model_dump(exclude_unset=True)

    if "unit_fare" in changes:
        option.unit_fare = money(req.unit_fare)
    if "return_fare" in changes:
        if req.return_fare is not None and option.flight_type != FlightType.ROUND_TRIP:
            raise HTTPException(status_code=400, detail="return_fare is only allowed on round_trip flights")
        option.return_fare = money(req.return_fare)
    if "currency_code" in changes:
        option.currency_code = currency_code(req.currency_code)
    if req.status is not None:
        option.status = req.status
    if "notes" in changes:
        option.notes = req.notes

    if req.legs is not None or req.return_legs is not None:
        if req.return_legs and option.flight_type != FlightType.ROUND_TRIP:
            raise HTTPException(status_code=400, detail="return_legs are only allowed on round_trip flights")
        outbound = (
            _build_legs(req.legs, LegDirection.OUTBOUND) if req.legs is not None
            else [l for l in option.legs if l.direction == LegDirection.OUTBOUND]
        )
        returns = (
            _build_legs(req.return_legs, LegDirection.RETURN) if req.return_legs is not None
            else [l for l in option.legs if l.direction == LegDirection.RETURN]
        )
        if not outbound:
            raise HTTPException(status_code=400, detail="A flight option needs at least one leg")
        option.legs = outbound + returns

    if req.traveler_ids is not None:
        option.travelers = await resolve_travelers(db, trip.id, req.traveler_ids)

    await db.commit()
    await db.refresh(option)
    return FlightOptionResponse.model_validate(option)


@router.post("/{trip_id}/flights/{flight_id}/duplicate", status_code=201, response_model=FlightOptionResponse)
async def duplicate_flight(
    flight_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    """Copy an option (legs and travelers included) as a new draft."""
    source = await _get_option(db, trip.id, flight_id)
    copy = FlightOption(
        trip_id=trip.id,
        flight_type=source.flight_type,
        unit_fare=source.unit_fare,
        return_fare=source.return_fare,
        currency_code=source.currency_code,
        status=ItemStatus.DRAFT,
        notes=source.notes,
    )
    copy.legs = [
        FlightLeg(
            direction=leg.direction,
            leg_order=leg.leg_order,
            departure_airport=leg.departure_airport,
            arrival_airport=leg.arrival_airport,
            departure_date=leg.departure_date,
            departure_time=leg.departure_time,
            arrival_date=leg.arrival_date,
            arrival_time=leg.arrival_time,
            airline=leg.airline,
            flight_number=leg.flight_number,
            stops_count=leg.stops_count,
            duration_minutes=leg.duration_minutes,
        )
        for leg in source.legs
    ]
    copy.travelers = list(source.travelers)

    db.add(copy)
    await db.commit()
    await db.refresh(copy)
    return FlightOptionResponse.model_validate(copy)


@router.delete("/{trip_id}/flights/{flight_id}", status_code=204)
async def delete_flight(
    flight_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    option = await _get_option(db, trip.id, flight_id)
    await db.delete(option)
    await db.commit()
