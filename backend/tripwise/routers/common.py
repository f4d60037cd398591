import uuid
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.models.trip import Traveler


async def resolve_travelers(db: AsyncSession, trip_id: uuid.UUID, traveler_ids: list[uuid.UUID]) -> list[Traveler]:
    """Load travelers by id, rejecting ids that are not on this trip."""
    if not traveler_ids:
        return []
    wanted = set(traveler_ids)
    result = await db.execute(
        select(Traveler).where(Traveler.trip_id == trip_id, Traveler.id.in_(wanted))
    )
    travelers = list(result.scalars().all())
    if len(travelers) != len(wanted):
        raise HTTPException(status_code=400, detail="One or more travelers do not belong to this trip")
    return travelers


def money(value: float | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def currency_code(value: str | None) -> str | None:
    return value.strip().upper() if value else None


def apply_order(items: list, ordered_ids: list[uuid.UUID]) -> None:
    """Set display_order from the position of each id in ``ordered_ids``."""
    by_id = {item.id: item for item in items}
    if set(ordered_ids) != set(by_id) or len(ordered_ids) != len(by_id):
        raise HTTPException(status_code=400, detail="ordered_ids must list every item exactly once")
    for position, item_id in enumerate(ordered_ids):
        by_id[item_id].display_order = position


async def next_order(db: AsyncSession, column, parent_column, parent_id: uuid.UUID) -> int:
    current = await db.scalar(select(func.max(column)).where(parent_column == parent_id))
    return 0 if current is None else current + 1
