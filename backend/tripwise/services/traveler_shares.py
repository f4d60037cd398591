"""Even cost splitting among cost-sharing travelers."""

import uuid
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from tripwise.errors import NoCostSharers
from tripwise.models.trip import Traveler
from tripwise.services.currency_service import CENT, quantize_money


@dataclass
class TravelerShare:
    traveler_id: uuid.UUID
    traveler_name: str
    traveler_currency: str | None
    is_primary: bool
    share_amount: Decimal
    share_currency: str

    def to_dict(self) -> dict:
        return {
            "traveler_id": str(self.traveler_id),
            "traveler_name": self.traveler_name,
            "traveler_currency": self.traveler_currency or self.share_currency,
            "is_primary": int(self.is_primary),
            "share_amount": float(self.share_amount),
            "share_currency": self.share_currency,
        }


def sharer_order(traveler: Traveler) -> tuple:
    """Primary first, then by name, then by id."""
    return (not traveler.is_primary, traveler.name.lower(), str(traveler.id))


def cost_sharers(travelers: list[Traveler]) -> list[Traveler]:
    return sorted(
        (t for t in travelers if t.is_active and t.is_cost_sharer),
        key=sharer_order,
    )


def split_evenly(total: Decimal, count: int) -> list[Decimal]:
    """Split ``total`` into ``count`` cent amounts that add up to ``total`` rounded.

    Leftover cents go to the first parts, one each.
    """
    if count <= 0:
        raise NoCostSharers("No cost-sharing travelers to split costs between")

    rounded_total = quantize_money(total)
    negative = rounded_total < 0
    magnitude = abs(rounded_total)

    base = (magnitude / count).quantize(CENT, rounding=ROUND_DOWN)
    leftover_cents = int((magnitude - base * count) / CENT)

    parts = [base + CENT if i < leftover_cents else base for i in range(count)]
    return [-p for p in parts] if negative else parts


def split_many(totals: list[Decimal], count: int) -> list[list[Decimal]]:
    """Split each total evenly, handing leftover cents round-robin across all totals.

    Position ``i`` of every returned list belongs to the same sharer. When the
    rounded totals add up to the rounded grand total, each sharer's sum equals
    their ``split_evenly`` part of that grand total.
    """
    cursor = 0
    result = []
    for total in totals:
        parts = split_evenly(total, count)
        extra = sum(1 for p in parts if p != parts[-1])
        rotated = [parts[(i - cursor) % count] for i in range(count)]
        result.append(rotated)
        cursor = (cursor + extra) % count
    return result


def compute_shares(total: Decimal, travelers: list[Traveler], currency: str) -> list[TravelerShare]:
    sharers = cost_sharers(travelers)
    if not sharers:
        raise NoCostSharers(
            "No active cost-sharing travelers on this trip. Mark at least one traveler as a cost sharer."
        )

    amounts = split_evenly(total, len(sharers))
    return [
        TravelerShare(
            traveler_id=t.id,
            traveler_name=t.name,
            traveler_currency=t.currency,
            is_primary=t.is_primary,
            share_amount=amount,
            share_currency=currency,
        )
        for t, amount in zip(sharers, amounts)
    ]
