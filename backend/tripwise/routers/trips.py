import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.dependencies import get_trip
from tripwise.errors import ActualsStateConflict
from tripwise.models.expense import ExpenseActual, ExpenseSplit
from tripwise.models.trip import Traveler, Trip
from tripwise.schemas.trip import (
    TravelerCreate,
    TravelerResponse,
    TravelerUpdate,
    TripCreate,
    TripResponse,
    TripUpdate,
)

router = APIRouter()


# ─── Trips ───

@router.get("", response_model=list[TripResponse])
async def list_trips(db: AsyncSession = Depends(get_db)):
    """List trips, soonest first."""
    result = await db.execute(
        select(Trip).order_by(Trip.start_date.is_(None), Trip.start_date, Trip.created_at)
    )
    return [TripResponse.model_validate(t) for t in result.scalars().all()]


@router.post("", status_code=201, response_model=TripResponse)
async def create_trip(req: TripCreate, db: AsyncSession = Depends(get_db)):
    if req.start_date and req.end_date and req.end_date < req.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    trip = Trip(**req.model_dump())
    trip.currency = trip.currency.upper()
    db.add(trip)
    await db.commit()
    await db.refresh(trip)
    return TripResponse.model_validate(trip)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip_detail(trip: Trip = Depends(get_trip)):
    return TripResponse.model_validate(trip)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    req: TripUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    changes = req.model_dump(exclude_unset=True)
    if "title" in changes and changes["title"] is None:
        raise HTTPException(status_code=400, detail="title cannot be empty")
    if "currency" in changes:
        if changes["currency"] is None:
            raise HTTPException(status_code=400, detail="currency cannot be empty")
        changes["currency"] = changes["currency"].upper()

    for field, value in changes.items():
        setattr(trip, field, value)

    if trip.start_date and trip.end_date and trip.end_date < trip.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    await db.commit()
    await db.refresh(trip)
    return TripResponse.model_validate(trip)


@router.delete("/{trip_id}", status_code=204)
async def delete_trip(trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    """Delete a trip and everything planned under it."""
    await db.delete(trip)
    await db.commit()


# ─── Travelers ───

async def _clear_primary(db: AsyncSession, trip_id: uuid.UUID, keep_id: uuid.UUID | None = None):
    stmt = update(Traveler).where(Traveler.trip_id == trip_id, Traveler.is_primary.is_(True))
    if keep_id:
        stmt = stmt.where(Traveler.id != keep_id)
    await db.execute(stmt.values(is_primary=False))


@router.get("/{trip_id}/travelers", response_model=list[TravelerResponse])
async def list_travelers(trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    """Travelers on a trip, primary first then by name."""
    result = await db.execute(
        select(Traveler)
        .where(Traveler.trip_id == trip.id)
        .order_by(Traveler.is_primary.desc(), Traveler.name)
    )
    return [TravelerResponse.model_validate(t) for t in result.scalars().all()]


@router.post("/{trip_id}/travelers", status_code=201, response_model=TravelerResponse)
async def create_traveler(
    req: TravelerCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    if req.is_primary:
        await _clear_primary(db, trip.id)

    traveler = Traveler(trip_id=trip.id, **req.model_dump())
    if traveler.currency:
        traveler.currency = traveler.currency.upper()
    db.add(traveler)
    await db.commit()
    await db.refresh(traveler)
    return TravelerResponse.model_validate(traveler)


async def _get_traveler(db: AsyncSession, trip_id: uuid.UUID, traveler_id: uuid.UUID) -> Traveler:
    traveler = await db.get(Traveler, traveler_id)
    if not traveler or traveler.trip_id != trip_id:
        raise HTTPException(status_code=404, detail="Traveler not found")
    return traveler


@router.put("/{trip_id}/travelers/{traveler_id}", response_model=TravelerResponse)
async def update_traveler(
    traveler_id: uuid.UUID,
    req: TravelerUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    traveler = await _get_traveler(db, trip.id, traveler_id)
    changes = req.model_dump(exclude_unset=True)

    if "name" in changes and changes["name"] is None:
        raise HTTPException(status_code=400, detail="name cannot be empty")
    if changes.get("is_primary"):
        await _clear_primary(db, trip.id, keep_id=traveler.id)
    if changes.get("currency"):
        changes["currency"] = changes["currency"].upper()

    for field, value in changes.items():
        if value is None and field in ("is_primary", "is_cost_sharer", "is_active"):
            continue
        setattr(traveler, field, value)

    await db.commit()
    await db.refresh(traveler)
    return TravelerResponse.model_validate(traveler)


async def _ensure_not_in_forecast(db: AsyncSession, traveler_id: uuid.UUID) -> None:
    """Travelers referenced by forecast splits or actuals stay until those rows are gone."""
    actuals = await db.scalar(
        select(func.count(ExpenseActual.id)).where(
            or_(ExpenseActual.traveler_id == traveler_id, ExpenseActual.paid_by_traveler_id == traveler_id)
        )
    )
    if actuals:
        raise ActualsStateConflict(
            "Traveler has expense actuals. Reset actuals before removing this traveler."
        )
    splits = await db.scalar(
        select(func.count(ExpenseSplit.id)).where(ExpenseSplit.traveler_id == traveler_id)
    )
    if splits:
        raise ActualsStateConflict(
            "Traveler is part of the current cost forecast. Deactivate them and collect costs again first."
        )


@router.delete("/{trip_id}/travelers/{traveler_id}", status_code=204)
async def delete_traveler(
    traveler_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    traveler = await _get_traveler(db, trip.id, traveler_id)
    await _ensure_not_in_forecast(db, traveler.id)
    await db.delete(traveler)
    await db.commit()
