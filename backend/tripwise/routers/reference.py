"""Reference data router: statuses, currencies and live exchange rates."""

from fastapi import APIRouter, Depends, HTTPException, Query

from tripwise.data.currency import CURRENCY_NAMES, CURRENCY_SYMBOLS
from tripwise.models.enums import ItemStatus
from tripwise.schemas.cost_forecast import ExchangeRatesResponse
from tripwise.services.exchange_rate_client import ExchangeRateClient, get_rate_provider

router = APIRouter()


@router.get("/statuses")
async def list_statuses():
    return [
        {"value": s.value, "label": s.value.replace("_", " ").title()}
        for s in ItemStatus
    ]


@router.get("/currencies")
async def list_currencies():
    return [
        {"code": code, "name": name, "symbol": CURRENCY_SYMBOLS.get(code, code)}
        for code, name in sorted(CURRENCY_NAMES.items())
    ]


@router.get("/exchange-rates", response_model=ExchangeRatesResponse)
async def exchange_rates(
    base: str = Query("USD", min_length=3, max_length=3),
    symbols: str = Query(""),
    rates: ExchangeRateClient = Depends(get_rate_provider),
):
    """Rates from ``base`` to each comma-separated symbol."""
    targets = [s.strip().upper() for s in symbols.split(",") if s.strip()]
    if not targets:
        raise HTTPException(status_code=400, detail="No target currencies specified")

    table = await rates.get_rates(base.upper(), targets)
    return table.to_dict()
