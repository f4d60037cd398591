"""Itinerary router: days, cost categories and activities."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.dependencies import get_trip
from tripwise.models.itinerary import ItineraryActivity, ItineraryCategory, ItineraryDay
from tripwise.models.trip import Trip
from tripwise.routers.common import apply_order, currency_code, money, next_order
from tripwise.schemas.itinerary import (
    ActivityCreate,
    ActivityResponse,
    ActivityUpdate,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    DayCreate,
    DayResponse,
    DayUpdate,
    ReorderRequest,
)

router = APIRouter()

COST_FIELDS = {"cost"}
CURRENCY_FIELDS = {"currency_code"}


def _apply_changes(obj, changes: dict, required: tuple[str, ...] = ()) -> None:
    for field, value in changes.items():
        if value is None and field in required:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        if field in COST_FIELDS:
            value = money(value)
        elif field in CURRENCY_FIELDS:
            value = currency_code(value)
        setattr(obj, field, value)


async def _get_day(db: AsyncSession, trip_id: uuid.UUID, day_id: uuid.UUID) -> ItineraryDay:
    result = await db.execute(
        select(ItineraryDay).where(ItineraryDay.id == day_id, ItineraryDay.trip_id == trip_id)
    )
    day = result.scalar_one_or_none()
    if not day:
        raise HTTPException(status_code=404, detail="Itinerary day not found")
    return day


async def _get_category(
    db: AsyncSession, trip_id: uuid.UUID, day_id: uuid.UUID, category_id: uuid.UUID
) -> ItineraryCategory:
    result = await db.execute(
        select(ItineraryCategory)
        .join(ItineraryDay, ItineraryCategory.day_id == ItineraryDay.id)
        .where(
            ItineraryCategory.id == category_id,
            ItineraryCategory.day_id == day_id,
            ItineraryDay.trip_id == trip_id,
        )
    )
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def _get_activity(
    db: AsyncSession, trip_id: uuid.UUID, day_id: uuid.UUID, category_id: uuid.UUID, activity_id: uuid.UUID
) -> ItineraryActivity:
    category = await _get_category(db, trip_id, day_id, category_id)
    activity = next((a for a in category.activities if a.id == activity_id), None)
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")
    return activity


# ─── Days ───

@router.get("/{trip_id}/itinerary", response_model=list[DayResponse])
async def list_days(trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    """All days of a trip with their categories and activities."""
    result = await db.execute(
        select(ItineraryDay).where(ItineraryDay.trip_id == trip.id).order_by(ItineraryDay.day_number)
    )
    return [DayResponse.model_validate(d) for d in result.scalars().all()]


@router.post("/{trip_id}/itinerary", status_code=201, response_model=DayResponse)
async def create_day(req: DayCreate, trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    existing = await db.scalar(
        select(ItineraryDay.id).where(
            ItineraryDay.trip_id == trip.id, ItineraryDay.day_number == req.day_number
        )
    )
    if existing:
        raise HTTPException(status_code=409, detail=f"Day {req.day_number} already exists")

    day = ItineraryDay(trip_id=trip.id, **req.model_dump())
    db.add(day)
    await db.commit()
    await db.refresh(day)
    return DayResponse.model_validate(day)


@router.put("/{trip_id}/itinerary/{day_id}", response_model=DayResponse)
async def update_day(
    day_id: uuid.UUID,
    req: DayUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    day = await _get_day(db, trip.id, day_id)
    _apply_changes(day, req.model_dump(exclude_unset=True), required=("day_date",))
    await db.commit()
    await db.refresh(day)
    return DayResponse.model_validate(day)


@router.delete("/{trip_id}/itinerary/{day_id}", status_code=204)
async def delete_day(day_id: uuid.UUID, trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    day = await _get_day(db, trip.id, day_id)
    await db.delete(day)
    await db.commit()


# ─── Categories ───

@router.post("/{trip_id}/itinerary/{day_id}/categories", status_code=201, response_model=CategoryResponse)
async def create_category(
    day_id: uuid.UUID,
    req: CategoryCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    day = await _get_day(db, trip.id, day_id)
    data = req.model_dump()
    if data["display_order"] is None:
        data["display_order"] = await next_order(
            db, ItineraryCategory.display_order, ItineraryCategory.day_id, day.id
        )
    category = ItineraryCategory(
        day_id=day.id,
        **{**data, "cost": money(req.cost), "currency_code": currency_code(req.currency_code)},
    )
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@router.put("/{trip_id}/itinerary/{day_id}/categories/reorder", response_model=list[CategoryResponse])
async def reorder_categories(
    day_id: uuid.UUID,
    req: ReorderRequest,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    day = await _get_day(db, trip.id, day_id)
    apply_order(day.categories, req.ordered_ids)
    await db.commit()
    await db.refresh(day)
    ordered = sorted(day.categories, key=lambda c: c.display_order)
    return [CategoryResponse.model_validate(c) for c in ordered]


@router.put("/{trip_id}/itinerary/{day_id}/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    day_id: uuid.UUID,
    category_id: uuid.UUID,
    req: CategoryUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, day_id, category_id)
    _apply_changes(
        category,
        req.model_dump(exclude_unset=True),
        required=("name", "cost_type", "is_active", "is_expanded", "display_order"),
    )
    await db.commit()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@router.delete("/{trip_id}/itinerary/{day_id}/categories/{category_id}", status_code=204)
async def delete_category(
    day_id: uuid.UUID,
    category_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, day_id, category_id)
    await db.delete(category)
    await db.commit()


# ─── Activities ───

@router.post(
    "/{trip_id}/itinerary/{day_id}/categories/{category_id}/activities",
    status_code=201,
    response_model=ActivityResponse,
)
async def create_activity(
    day_id: uuid.UUID,
    category_id: uuid.UUID,
    req: ActivityCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, day_id, category_id)
    data = req.model_dump()
    if data["display_order"] is None:
        data["display_order"] = await next_order(
            db, ItineraryActivity.display_order, ItineraryActivity.category_id, category.id
        )
    activity = ItineraryActivity(
        category_id=category.id,
        **{**data, "cost": money(req.cost), "currency_code": currency_code(req.currency_code)},
    )
    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return ActivityResponse.model_validate(activity)


@router.put(
    "/{trip_id}/itinerary/{day_id}/categories/{category_id}/activities/reorder",
    response_model=list[ActivityResponse],
)
async def reorder_activities(
    day_id: uuid.UUID,
    category_id: uuid.UUID,
    req: ReorderRequest,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, day_id, category_id)
    apply_order(category.activities, req.ordered_ids)
    await db.commit()
    await db.refresh(category)
    ordered = sorted(category.activities, key=lambda a: a.display_order)
    return [ActivityResponse.model_validate(a) for a in ordered]


@router.put(
    "/{trip_id}/itinerary/{day_id}/categories/{category_id}/activities/{activity_id}",
    response_model=ActivityResponse,
)
async def update_activity(
    day_id: uuid.UUID,
    category_id: uuid.UUID,
    activity_id: uuid.UUID,
    req: ActivityUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    activity = await _get_activity(db, trip.id, day_id, category_id, activity_id)
    _apply_changes(
        activity,
        req.model_dump(exclude_unset=True),
        required=("name", "cost_type", "display_order", "is_completed"),
    )
    await db.commit()
    await db.refresh(activity)
    return ActivityResponse.model_validate(activity)


@router.post(
    "/{trip_id}/itinerary/{day_id}/categories/{category_id}/activities/{activity_id}/toggle",
    response_model=ActivityResponse,
)
async def toggle_activity(
    day_id: uuid.UUID,
    category_id: uuid.UUID,
    activity_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    """Flip an activity's completed flag."""
    activity = await _get_activity(db, trip.id, day_id, category_id, activity_id)
    activity.is_completed = not activity.is_completed
    await db.commit()
    await db.refresh(activity)
    return ActivityResponse.model_validate(activity)


@router.delete(
    "/{trip_id}/itinerary/{day_id}/categories/{category_id}/activities/{activity_id}",
    status_code=204,
)
async def delete_activity(
    day_id: uuid.UUID,
    category_id: uuid.UUID,
    activity_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    activity = await _get_activity(db, trip.id, day_id, category_id, activity_id)
    await db.delete(activity)
    await db.commit()
