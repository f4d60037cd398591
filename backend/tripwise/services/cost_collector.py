"""Cost collector: turns planning records into priced line items.

Each cost-bearing module contributes CostLineItems in its own currency:

* flights: (unit fare + return fare) x active travelers on the option
* accommodations: stored total price
* itinerary: category cost when set, otherwise each costed activity;
  per-head costs are multiplied by their headcount
* ad-hoc expenses: amount, active rows only
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.errors import DataIntegrityError, ValidationFailed
from tripwise.models.accommodation import AccommodationOption
from tripwise.models.adhoc_expense import AdhocExpense
from tripwise.models.enums import CostModule, CostType, ItemStatus
from tripwise.models.flight import FlightOption
from tripwise.models.itinerary import ItineraryDay
from tripwise.models.trip import Traveler

logger = logging.getLogger(__name__)


@dataclass
class CostLineItem:
    module: CostModule
    source_id: uuid.UUID | None
    description: str
    amount: Decimal
    currency: str
    cost_type: CostType = CostType.TOTAL
    headcount: int = 1
    status: ItemStatus | None = None


def parse_statuses(statuses: list[str] | None) -> list[ItemStatus]:
    """Validate a status selection. At least one known status is required."""
    if not statuses:
        raise ValidationFailed("Select at least one status to include in the forecast")

    parsed = []
    for raw in statuses:
        try:
            status = ItemStatus(raw)
        except ValueError:
            valid = ", ".join(s.value for s in ItemStatus)
            raise ValidationFailed(f"Unknown status '{raw}'. Must be one of: {valid}")
        if status not in parsed:
            parsed.append(status)
    return parsed


def _require_currency(module: CostModule, description: str, currency: str | None) -> str:
    if not currency or not currency.strip():
        raise DataIntegrityError(f"{module.value} item '{description}' has an amount but no currency")
    return currency.strip().upper()


def _flight_description(option: FlightOption) -> str:
    outbound = option.outbound_legs
    if not outbound:
        return f"Flight ({option.flight_type.value.replace('_', ' ')})"
    route = [outbound[0].departure_airport] + [leg.arrival_airport for leg in outbound]
    label = " -> ".join(route)
    if option.return_legs:
        label += " (return)"
    return label


class CostCollector:
    """Collects billable items for a trip from every cost-bearing module."""

    async def collect(
        self,
        db: AsyncSession,
        trip_id: uuid.UUID,
        statuses: list[ItemStatus],
        travelers: list[Traveler],
    ) -> list[CostLineItem]:
        if not statuses:
            raise ValidationFailed("Select at least one status to include in the forecast")

        active_ids = {t.id for t in travelers if t.is_active}
        default_headcount = max(
            sum(1 for t in travelers if t.is_active and t.is_cost_sharer), 1
        )

        items: list[CostLineItem] = []
        items += await self.collect_flights(db, trip_id, statuses, active_ids)
        items += await self.collect_accommodations(db, trip_id, statuses)
        items += await self.collect_itinerary(db, trip_id, default_headcount)
        items += await self.collect_adhoc(db, trip_id)

        logger.info(f"Collected {len(items)} cost items for trip {trip_id}")
        return items

    # ─── Flights ───

    async def collect_flights(
        self, db: AsyncSession, trip_id: uuid.UUID, statuses: list[ItemStatus], active_ids: set
    ) -> list[CostLineItem]:
        result = await db.execute(
            select(FlightOption)
            .where(FlightOption.trip_id == trip_id, FlightOption.status.in_(statuses))
            .order_by(FlightOption.created_at, FlightOption.id)
        )
        items = []
        for option in result.scalars().all():
            fare = (option.unit_fare or Decimal("0")) + (option.return_fare or Decimal("0"))
            if option.unit_fare is None and option.return_fare is None:
                continue

            description = _flight_description(option)
            currency = _require_currency(CostModule.FLIGHTS, description, option.currency_code)
            flying = [t for t in option.travelers if t.id in active_ids]
            headcount = len(flying) or 1

            items.append(CostLineItem(
                module=CostModule.FLIGHTS,
                source_id=option.id,
                description=description,
                amount=fare * headcount,
                currency=currency,
                cost_type=CostType.PER_HEAD,
                headcount=headcount,
                status=option.status,
            ))
        return items

    # ─── Accommodations ───

    async def collect_accommodations(
        self, db: AsyncSession, trip_id: uuid.UUID, statuses: list[ItemStatus]
    ) -> list[CostLineItem]:
        result = await db.execute(
            select(AccommodationOption)
            .where(AccommodationOption.trip_id == trip_id, AccommodationOption.status.in_(statuses))
            .order_by(AccommodationOption.check_in_date, AccommodationOption.id)
        )
        items = []
        for option in result.scalars().all():
            if option.total_price is None:
                continue
            description = option.name or option.type_name or "Accommodation"
            currency = _require_currency(CostModule.ACCOMMODATIONS, description, option.currency_code)
            items.append(CostLineItem(
                module=CostModule.ACCOMMODATIONS,
                source_id=option.id,
                description=description,
                amount=option.total_price,
                currency=currency,
                status=option.status,
            ))
        return items

    # ─── Itinerary ───

    async def collect_itinerary(
        self, db: AsyncSession, trip_id: uuid.UUID, default_headcount: int
    ) -> list[CostLineItem]:
        result = await db.execute(
            select(ItineraryDay)
            .where(ItineraryDay.trip_id == trip_id)
            .order_by(ItineraryDay.day_number)
        )
        items = []
        for day in result.scalars().all():
            for category in day.categories:
                if not category.is_active:
                    continue

                if category.cost is not None:
                    description = f"Day {day.day_number}: {category.name}"
                    items.append(self._itinerary_item(
                        category.id, description, category.cost, category.currency_code,
                        category.cost_type, category.headcount, default_headcount,
                    ))
                    continue

                for activity in category.activities:
                    if activity.cost is None:
                        continue
                    description = f"Day {day.day_number}: {activity.name}"
                    items.append(self._itinerary_item(
                        activity.id, description, activity.cost, activity.currency_code,
                        activity.cost_type, activity.headcount, default_headcount,
                    ))
        return items

    @staticmethod
    def _itinerary_item(
        source_id, description, cost, currency_code, cost_type, headcount, default_headcount
    ) -> CostLineItem:
        currency = _require_currency(CostModule.ITINERARY, description, currency_code)
        heads = 1
        if cost_type == CostType.PER_HEAD:
            heads = headcount or default_headcount
        return CostLineItem(
            module=CostModule.ITINERARY,
            source_id=source_id,
            description=description,
            amount=cost * heads,
            currency=currency,
            cost_type=cost_type,
            headcount=heads,
        )

    # ─── Ad-hoc ───

    async def collect_adhoc(self, db: AsyncSession, trip_id: uuid.UUID) -> list[CostLineItem]:
        result = await db.execute(
            select(AdhocExpense)
            .where(AdhocExpense.trip_id == trip_id, AdhocExpense.is_active.is_(True))
            .order_by(AdhocExpense.expense_date, AdhocExpense.id)
        )
        items = []
        for expense in result.scalars().all():
            currency = _require_currency(CostModule.ADHOC, expense.name, expense.currency_code)
            items.append(CostLineItem(
                module=CostModule.ADHOC,
                source_id=expense.id,
                description=expense.name,
                amount=expense.amount,
                currency=currency,
            ))
        return items


cost_collector = CostCollector()
