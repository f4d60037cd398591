"""Packing list router: categories and the items packed under them."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.dependencies import get_trip
from tripwise.models.packing import PackingCategory, PackingItem
from tripwise.models.trip import Trip
from tripwise.routers.common import apply_order, next_order
from tripwise.schemas.itinerary import ReorderRequest
from tripwise.schemas.packing import (
    PackingCategoryCreate,
    PackingCategoryResponse,
    PackingCategoryUpdate,
    PackingItemCreate,
    PackingItemResponse,
    PackingItemUpdate,
    PackingListResponse,
    PackingStats,
)

router = APIRouter()


def _apply_changes(obj, changes: dict, required: tuple[str, ...]) -> None:
    for field, value in changes.items():
        if value is None and field in required:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        setattr(obj, field, value)


async def _get_category(db: AsyncSession, trip_id: uuid.UUID, category_id: uuid.UUID) -> PackingCategory:
    result = await db.execute(
        select(PackingCategory).where(
            PackingCategory.id == category_id, PackingCategory.trip_id == trip_id
        )
    )
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Packing category not found")
    return category


async def _get_item(db: AsyncSession, trip_id: uuid.UUID, item_id: uuid.UUID) -> PackingItem:
    result = await db.execute(
        select(PackingItem)
        .join(PackingCategory, PackingItem.category_id == PackingCategory.id)
        .where(PackingItem.id == item_id, PackingCategory.trip_id == trip_id)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Packing item not found")
    return item


def packing_stats(categories: list[PackingCategory]) -> PackingStats:
    items = [item for c in categories for item in c.items]
    packed = sum(1 for item in items if item.is_packed)
    percentage = round(packed * 100 / len(items)) if items else 0
    return PackingStats(total_items=len(items), packed_items=packed, percentage=percentage)


# ─── Categories ───

@router.get("/{trip_id}/packing", response_model=PackingListResponse)
async def get_packing_list(trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    """Every category with its items, plus packed/total counts."""
    result = await db.execute(
        select(PackingCategory)
        .where(PackingCategory.trip_id == trip.id)
        .order_by(PackingCategory.display_order, PackingCategory.created_at)
    )
    categories = list(result.scalars().all())
    return PackingListResponse(
        categories=[PackingCategoryResponse.model_validate(c) for c in categories],
        stats=packing_stats(categories),
    )


@router.post("/{trip_id}/packing", status_code=201, response_model=PackingCategoryResponse)
async def create_category(
    req: PackingCategoryCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    data = req.model_dump()
    if data["display_order"] is None:
        data["display_order"] = await next_order(
            db, PackingCategory.display_order, PackingCategory.trip_id, trip.id
        )
    category = PackingCategory(trip_id=trip.id, **data)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return PackingCategoryResponse.model_validate(category)


@router.put("/{trip_id}/packing/categories/reorder", response_model=list[PackingCategoryResponse])
async def reorder_categories(
    req: ReorderRequest,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(PackingCategory).where(PackingCategory.trip_id == trip.id))
    categories = list(result.scalars().all())
    apply_order(categories, req.ordered_ids)
    await db.commit()
    return [
        PackingCategoryResponse.model_validate(c)
        for c in sorted(categories, key=lambda c: c.display_order)
    ]


@router.get("/{trip_id}/packing/categories/{category_id}", response_model=PackingCategoryResponse)
async def get_category(
    category_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    return PackingCategoryResponse.model_validate(await _get_category(db, trip.id, category_id))


@router.put("/{trip_id}/packing/categories/{category_id}", response_model=PackingCategoryResponse)
async def update_category(
    category_id: uuid.UUID,
    req: PackingCategoryUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, category_id)
    _apply_changes(category, req.model_dump(exclude_unset=True), required=("name", "display_order"))
    await db.commit()
    await db.refresh(category)
    return PackingCategoryResponse.model_validate(category)


@router.delete("/{trip_id}/packing/categories/{category_id}", status_code=204)
async def delete_category(
    category_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, category_id)
    await db.delete(category)
    await db.commit()


# ─── Items ───

@router.post(
    "/{trip_id}/packing/categories/{category_id}/items",
    status_code=201,
    response_model=PackingItemResponse,
)
async def create_item(
    category_id: uuid.UUID,
    req: PackingItemCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, category_id)
    data = req.model_dump()
    if data["display_order"] is None:
        data["display_order"] = await next_order(
            db, PackingItem.display_order, PackingItem.category_id, category.id
        )
    item = PackingItem(category_id=category.id, **data)
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return PackingItemResponse.model_validate(item)


@router.put(
    "/{trip_id}/packing/categories/{category_id}/items/reorder",
    response_model=list[PackingItemResponse],
)
async def reorder_items(
    category_id: uuid.UUID,
    req: ReorderRequest,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, trip.id, category_id)
    apply_order(category.items, req.ordered_ids)
    await db.commit()
    return [
        PackingItemResponse.model_validate(i)
        for i in sorted(category.items, key=lambda i: i.display_order)
    ]


@router.get("/{trip_id}/packing/items/{item_id}", response_model=PackingItemResponse)
async def get_item(item_id: uuid.UUID, trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    return PackingItemResponse.model_validate(await _get_item(db, trip.id, item_id))


@router.put("/{trip_id}/packing/items/{item_id}", response_model=PackingItemResponse)
async def update_item(
    item_id: uuid.UUID,
    req: PackingItemUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    item = await _get_item(db, trip.id, item_id)
    _apply_changes(
        item,
        req.model_dump(exclude_unset=True),
        required=("name", "is_packed", "priority", "display_order"),
    )
    await db.commit()
    await db.refresh(item)
    return PackingItemResponse.model_validate(item)


@router.post("/{trip_id}/packing/items/{item_id}/toggle", response_model=PackingItemResponse)
async def toggle_item(item_id: uuid.UUID, trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    """Flip an item's packed flag."""
    item = await _get_item(db, trip.id, item_id)
    item.is_packed = not item.is_packed
    await db.commit()
    await db.refresh(item)
    return PackingItemResponse.model_validate(item)


@router.delete("/{trip_id}/packing/items/{item_id}", status_code=204)
async def delete_item(item_id: uuid.UUID, trip: Trip = Depends(get_trip), db: AsyncSession = Depends(get_db)):
    item = await _get_item(db, trip.id, item_id)
    await db.delete(item)
    await db.commit()
