"""Currency conversion over a base-anchored rate table."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from tripwise.errors import ExchangeRateUnavailable

CENT = Decimal("0.01")


@dataclass
class RateTable:
    """rates[X] is the number of X for one unit of base."""

    base: str
    rates: dict[str, Decimal] = field(default_factory=dict)
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        self.base = self.base.upper()
        self.rates = {code.upper(): to_decimal(rate) for code, rate in self.rates.items()}
        self.rates[self.base] = Decimal("1")

    def has(self, currency: str) -> bool:
        rate = self.rates.get(currency.upper())
        return rate is not None and rate > 0

    def to_dict(self) -> dict:
        return {
            "base": self.base,
            "rates": {code: float(rate) for code, rate in self.rates.items()},
            "fetched_at": self.fetched_at.isoformat(),
        }


@dataclass(frozen=True)
class Conversion:
    converted: Decimal
    rate: Decimal


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents for output. Never fed back into sums."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def conversion_rate(from_currency: str, to_currency: str, table: RateTable) -> Decimal:
    """Rate r such that amount_in_from * r == amount_in_to."""
    src = from_currency.upper()
    dst = to_currency.upper()
    if src == dst:
        return Decimal("1")

    if src == table.base and table.has(dst):
        return table.rates[dst]
    if dst == table.base and table.has(src):
        return 1 / table.rates[src]
    if table.has(src) and table.has(dst):
        # Cross through the base currency
        return table.rates[dst] / table.rates[src]

    raise ExchangeRateUnavailable(src, dst)


def convert(amount, from_currency: str, to_currency: str, table: RateTable) -> Conversion:
    rate = conversion_rate(from_currency, to_currency, table)
    return Conversion(converted=to_decimal(amount) * rate, rate=rate)
