import uuid

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.models.trip import Trip


async def get_trip(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> Trip:
    """Resolve the ``trip_id`` path parameter or 404."""
    trip = await db.get(Trip, trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip
