"""Forecast aggregator: normalises line items into one base currency.

Sums are kept at full Decimal precision; rounding to cents only happens in
``to_dict`` helpers when the report is serialised.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from tripwise.models.enums import CostModule
from tripwise.services.cost_collector import CostLineItem
from tripwise.services.currency_service import RateTable, convert, quantize_money

MODULE_ORDER = [
    CostModule.FLIGHTS,
    CostModule.ACCOMMODATIONS,
    CostModule.ITINERARY,
    CostModule.ADHOC,
]


@dataclass
class FxConversionRecord:
    module: CostModule
    description: str
    original_amount: Decimal
    original_currency: str
    exchange_rate: Decimal
    converted_amount: Decimal
    converted_currency: str

    def to_dict(self) -> dict:
        return {
            "module": self.module.value,
            "description": self.description,
            "original_amount": float(quantize_money(self.original_amount)),
            "original_currency": self.original_currency,
            "exchange_rate": float(round(self.exchange_rate, 6)),
            "converted_amount": float(quantize_money(self.converted_amount)),
            "converted_currency": self.converted_currency,
        }


@dataclass
class ConvertedLineItem:
    item: CostLineItem
    converted_amount: Decimal
    exchange_rate: Decimal

    def to_dict(self) -> dict:
        return {
            "id": str(self.item.source_id) if self.item.source_id else None,
            "module": self.item.module.value,
            "description": self.item.description,
            "amount": float(quantize_money(self.item.amount)),
            "currency_code": self.item.currency,
            "cost_type": self.item.cost_type.value,
            "headcount": self.item.headcount,
            "status": self.item.status.value if self.item.status else None,
            "converted_amount": float(quantize_money(self.converted_amount)),
            "exchange_rate": float(round(self.exchange_rate, 6)),
        }


@dataclass
class ModuleBreakdown:
    module: CostModule
    currency: str
    items: list[ConvertedLineItem] = field(default_factory=list)
    total: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "module": self.module.value,
            "total": float(quantize_money(self.total)),
            "currency_code": self.currency,
            "items_count": len(self.items),
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class Aggregate:
    base_currency: str
    modules: list[ModuleBreakdown]
    fx_items: list[FxConversionRecord]
    total_cost: Decimal

    @property
    def converted_items(self) -> list[ConvertedLineItem]:
        return [item for m in self.modules for item in m.items]


def aggregate(items: list[CostLineItem], base_currency: str, rates: RateTable) -> Aggregate:
    """Convert every item to ``base_currency`` and total per module.

    Raises ExchangeRateUnavailable when any needed pair is missing from ``rates``.
    """
    base = base_currency.upper()
    modules = {m: ModuleBreakdown(module=m, currency=base) for m in MODULE_ORDER}
    fx_items: list[FxConversionRecord] = []

    for item in items:
        if item.currency == base:
            converted, rate = item.amount, Decimal("1")
        else:
            conversion = convert(item.amount, item.currency, base, rates)
            converted, rate = conversion.converted, conversion.rate
            fx_items.append(FxConversionRecord(
                module=item.module,
                description=item.description,
                original_amount=item.amount,
                original_currency=item.currency,
                exchange_rate=rate,
                converted_amount=converted,
                converted_currency=base,
            ))

        breakdown = modules[item.module]
        breakdown.items.append(ConvertedLineItem(item=item, converted_amount=converted, exchange_rate=rate))
        breakdown.total += converted

    ordered = [modules[m] for m in MODULE_ORDER]
    return Aggregate(
        base_currency=base,
        modules=ordered,
        fx_items=fx_items,
        total_cost=sum((m.total for m in ordered), Decimal("0")),
    )
