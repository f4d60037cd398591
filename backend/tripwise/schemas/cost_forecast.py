from pydantic import BaseModel, Field


class CollectCostsRequest(BaseModel):
    statuses: list[str] | None = Field(
        default=None,
        description="Statuses to include. Defaults to confirmed and shortlisted.",
    )


class LineItemResponse(BaseModel):
    id: str | None
    module: str
    description: str
    amount: float
    currency_code: str
    cost_type: str
    headcount: int
    status: str | None
    converted_amount: float
    exchange_rate: float


class ModuleBreakdownResponse(BaseModel):
    module: str
    total: float
    currency_code: str
    items_count: int
    items: list[LineItemResponse]


class TravelerShareResponse(BaseModel):
    traveler_id: str
    traveler_name: str
    traveler_currency: str
    is_primary: int
    share_amount: float
    share_currency: str


class ConvertedShareResponse(TravelerShareResponse):
    display_currency: str
    display_amount: float
    exchange_rate: float


class FxItemResponse(BaseModel):
    module: str
    description: str
    original_amount: float
    original_currency: str
    exchange_rate: float
    converted_amount: float
    converted_currency: str


class CostForecastReport(BaseModel):
    trip_id: str
    base_currency: str
    total_cost: float
    module_breakdown: list[ModuleBreakdownResponse]
    traveler_shares: list[TravelerShareResponse]
    fx_items: list[FxItemResponse]
    status_filter: list[str]
    cost_sharers_count: int
    generated_at: str


class ExchangeRatesResponse(BaseModel):
    base: str
    rates: dict[str, float]
    fetched_at: str
