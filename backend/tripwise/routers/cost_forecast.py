"""Cost forecast router: collect, read and per-traveler currency views."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.config import settings
from tripwise.database import get_db
from tripwise.schemas.cost_forecast import CollectCostsRequest, ConvertedShareResponse, CostForecastReport
from tripwise.services.cost_forecast_service import cost_forecast_service
from tripwise.services.exchange_rate_client import ExchangeRateClient, get_rate_provider

router = APIRouter()


@router.get("/{trip_id}/cost-forecast", response_model=CostForecastReport)
async def get_cost_forecast(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Last collected report for the trip."""
    return await cost_forecast_service.get_report(db, trip_id)


@router.post("/{trip_id}/cost-forecast", response_model=CostForecastReport)
async def collect_cost_forecast(
    trip_id: uuid.UUID,
    req: CollectCostsRequest | None = None,
    db: AsyncSession = Depends(get_db),
    rates: ExchangeRateClient = Depends(get_rate_provider),
):
    """Recompute the forecast from current planning data and store it."""
    statuses = settings.default_forecast_statuses
    if req is not None and req.statuses is not None:
        statuses = req.statuses
    return await cost_forecast_service.collect_costs(db, trip_id, statuses, rates)


@router.get(
    "/{trip_id}/cost-forecast/shares/{traveler_id}",
    response_model=ConvertedShareResponse,
)
async def convert_traveler_share(
    trip_id: uuid.UUID,
    traveler_id: uuid.UUID,
    currency: str = Query(..., min_length=3, max_length=3),
    db: AsyncSession = Depends(get_db),
    rates: ExchangeRateClient = Depends(get_rate_provider),
):
    """A traveler's share shown in another currency."""
    return await cost_forecast_service.convert_share(db, trip_id, traveler_id, currency, rates)
