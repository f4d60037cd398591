import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.dependencies import get_trip
from tripwise.models.accommodation import AccommodationOption
from tripwise.models.enums import ItemStatus
from tripwise.models.trip import Trip
from tripwise.routers.common import currency_code, money, resolve_travelers
from tripwise.schemas.accommodation import (
    AccommodationCreate,
    AccommodationResponse,
    AccommodationUpdate,
)

router = APIRouter()

PRICING_FIELDS = {"price_per_night", "check_in_date", "check_out_date", "num_rooms"}


def _derive_total(option: AccommodationOption) -> None:
    """total_price = nightly rate x nights x rooms, when all parts are known."""
    nights = option.nights
    if option.price_per_night is not None and nights:
        option.total_price = option.price_per_night * nights * (option.num_rooms or 1)


def _check_dates(option: AccommodationOption) -> None:
    if option.check_in_date and option.check_out_date and option.check_out_date < option.check_in_date:
        raise HTTPException(status_code=400, detail="check_out_date must not be before check_in_date")


async def _get_option(db: AsyncSession, trip_id: uuid.UUID, accommodation_id: uuid.UUID) -> AccommodationOption:
    result = await db.execute(
        select(AccommodationOption).where(
            AccommodationOption.id == accommodation_id, AccommodationOption.trip_id == trip_id
        )
    )
    option = result.scalar_one_or_none()
    if not option:
        raise HTTPException(status_code=404, detail="Accommodation not found")
    return option


@router.get("/{trip_id}/accommodations", response_model=list[AccommodationResponse])
async def list_accommodations(
    status: ItemStatus | None = None,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    query = select(AccommodationOption).where(AccommodationOption.trip_id == trip.id)
    if status:
        query = query.where(AccommodationOption.status == status)
    result = await db.execute(query.order_by(AccommodationOption.check_in_date, AccommodationOption.created_at))
    return [AccommodationResponse.model_validate(a) for a in result.scalars().all()]


@router.post("/{trip_id}/accommodations", status_code=201, response_model=AccommodationResponse)
async def create_accommodation(
    req: AccommodationCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    data = req.model_dump(exclude={"traveler_ids", "price_per_night", "total_price", "currency_code"})
    option = AccommodationOption(
        trip_id=trip.id,
        price_per_night=money(req.price_per_night),
        total_price=money(req.total_price),
        currency_code=currency_code(req.currency_code),
        **data,
    )
    _check_dates(option)
    if req.total_price is None:
        _derive_total(option)
    option.travelers = await resolve_travelers(db, trip.id, req.traveler_ids or [])

    db.add(option)
    await db.commit()
    await db.refresh(option)
    return AccommodationResponse.model_validate(option)


@router.get("/{trip_id}/accommodations/{accommodation_id}", response_model=AccommodationResponse)
async def get_accommodation(
    accommodation_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    return AccommodationResponse.model_validate(await _get_option(db, trip.id, accommodation_id))


@router.put("/{trip_id}/accommodations/{accommodation_id}", response_model=AccommodationResponse)
async def update_accommodation(
    accommodation_id: uuid.UUID,
    req: AccommodationUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    option = await _get_option(db, trip.id, accommodation_id)
    changes = req.model_dump(exclude_unset=True)

    traveler_ids = changes.pop("traveler_ids", None)
    for field, value in changes.items():
        if field in ("price_per_night", "total_price"):
            value = money(value)
        elif field == "currency_code":
            value = currency_code(value)
        elif field in ("num_rooms", "status") and value is None:
            continue
        setattr(option, field, value)

    _check_dates(option)
    if "total_price" not in changes and PRICING_FIELDS & changes.keys():
        _derive_total(option)
    if traveler_ids is not None:
        option.travelers = await resolve_travelers(db, trip.id, traveler_ids)

    await db.commit()
    await db.refresh(option)
    return AccommodationResponse.model_validate(option)


@router.delete("/{trip_id}/accommodations/{accommodation_id}", status_code=204)
async def delete_accommodation(
    accommodation_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    option = await _get_option(db, trip.id, accommodation_id)
    await db.delete(option)
    await db.commit()
