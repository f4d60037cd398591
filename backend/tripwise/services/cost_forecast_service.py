"""Cost forecast service: collect, convert, split and snapshot a trip's costs."""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.errors import ActualsStateConflict, NotFound, ValidationFailed
from tripwise.models.enums import ItemStatus
from tripwise.models.expense import CostForecast, Expense, ExpenseActual, ExpenseSplit
from tripwise.models.trip import Traveler, Trip
from tripwise.services.cost_collector import cost_collector, parse_statuses
from tripwise.services.currency_service import RateTable, convert, quantize_money
from tripwise.services.forecast_aggregator import Aggregate, aggregate
from tripwise.services.traveler_shares import compute_shares, cost_sharers, split_many

logger = logging.getLogger(__name__)


class RateProvider(Protocol):
    async def get_rates(self, base: str, symbols: list[str]) -> RateTable: ...


async def load_trip(db: AsyncSession, trip_id: uuid.UUID) -> Trip:
    trip = await db.get(Trip, trip_id)
    if not trip:
        raise NotFound("Trip not found")
    return trip


async def load_travelers(db: AsyncSession, trip_id: uuid.UUID) -> list[Traveler]:
    result = await db.execute(
        select(Traveler).where(Traveler.trip_id == trip_id).order_by(Traveler.name)
    )
    return list(result.scalars().all())


def base_currency_for(trip: Trip, travelers: list[Traveler]) -> str:
    """The primary traveler's currency, else the trip's default currency."""
    for t in travelers:
        if t.is_primary and t.is_active and t.currency:
            return t.currency.upper()
    return trip.currency.upper()


async def count_actuals(db: AsyncSession, trip_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(ExpenseActual.id))
        .join(Expense, ExpenseActual.expense_id == Expense.id)
        .where(Expense.trip_id == trip_id)
    )
    return result.scalar_one()


class CostForecastService:
    """Builds the forecast report and keeps the per-trip snapshot current."""

    async def collect_costs(
        self,
        db: AsyncSession,
        trip_id: uuid.UUID,
        statuses: list[str] | None,
        rate_provider: RateProvider,
    ) -> dict:
        selected = parse_statuses(statuses)
        trip = await load_trip(db, trip_id)
        travelers = await load_travelers(db, trip_id)

        if await count_actuals(db, trip_id):
            raise ActualsStateConflict(
                "Expense actuals already exist for this trip. Reset actuals before collecting again."
            )

        items = await cost_collector.collect(db, trip_id, selected, travelers)
        base = base_currency_for(trip, travelers)

        foreign = sorted({i.currency for i in items if i.currency != base})
        rates = await rate_provider.get_rates(base, foreign) if foreign else RateTable(base=base)

        agg = aggregate(items, base, rates)
        shares = compute_shares(agg.total_cost, travelers, base)

        report = self._build_report(trip_id, agg, shares, selected)
        await self._save_snapshot(db, trip_id, agg, travelers, report)

        logger.info(
            f"Cost forecast for trip {trip_id}: {report['total_cost']} {base} "
            f"over {len(items)} items, {len(shares)} sharers"
        )
        return report

    @staticmethod
    def _build_report(trip_id, agg: Aggregate, shares, statuses: list[ItemStatus]) -> dict:
        return {
            "trip_id": str(trip_id),
            "base_currency": agg.base_currency,
            "total_cost": float(quantize_money(agg.total_cost)),
            "module_breakdown": [m.to_dict() for m in agg.modules],
            "traveler_shares": [s.to_dict() for s in shares],
            "fx_items": [fx.to_dict() for fx in agg.fx_items],
            "status_filter": [s.value for s in statuses],
            "cost_sharers_count": len(shares),
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }

    async def _save_snapshot(
        self, db: AsyncSession, trip_id: uuid.UUID, agg: Aggregate, travelers: list[Traveler], report: dict
    ) -> None:
        """Replace the stored forecast and its expense rows in one transaction."""
        sharers = cost_sharers(travelers)
        try:
            old_expense_ids = select(Expense.id).where(Expense.trip_id == trip_id)
            await db.execute(delete(ExpenseSplit).where(ExpenseSplit.expense_id.in_(old_expense_ids)))
            await db.execute(delete(Expense).where(Expense.trip_id == trip_id))
            await db.execute(delete(CostForecast).where(CostForecast.trip_id == trip_id))

            split_rows = split_many([c.converted_amount for c in agg.converted_items], len(sharers))
            for converted, parts in zip(agg.converted_items, split_rows):
                expense = Expense(
                    trip_id=trip_id,
                    module=converted.item.module,
                    source_id=converted.item.source_id,
                    description=converted.item.description[:255],
                    original_amount=quantize_money(converted.item.amount),
                    original_currency=converted.item.currency,
                    exchange_rate=round(converted.exchange_rate, 8),
                    estimated_amount=quantize_money(converted.converted_amount),
                    currency=agg.base_currency,
                )
                expense.splits = [
                    ExpenseSplit(traveler_id=t.id, estimated_split_amount=amount)
                    for t, amount in zip(sharers, parts)
                ]
                db.add(expense)

            db.add(CostForecast(
                trip_id=trip_id,
                base_currency=agg.base_currency,
                total_cost=quantize_money(agg.total_cost),
                status_filter=report["status_filter"],
                report=report,
                generated_at=datetime.fromisoformat(report["generated_at"]),
            ))
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception(f"Saving cost forecast for trip {trip_id} failed; rolled back")
            raise

    async def get_report(self, db: AsyncSession, trip_id: uuid.UUID) -> dict:
        await load_trip(db, trip_id)
        result = await db.execute(select(CostForecast).where(CostForecast.trip_id == trip_id))
        snapshot = result.scalar_one_or_none()
        if not snapshot:
            raise NotFound("No cost data collected yet")
        return snapshot.report

    async def convert_share(
        self,
        db: AsyncSession,
        trip_id: uuid.UUID,
        traveler_id: uuid.UUID,
        currency: str,
        rate_provider: RateProvider,
    ) -> dict:
        """A traveler's share in a display currency. Not persisted."""
        report = await self.get_report(db, trip_id)
        share = next(
            (s for s in report["traveler_shares"] if s["traveler_id"] == str(traveler_id)),
            None,
        )
        if share is None:
            raise NotFound("Traveler has no share in the current forecast")

        target = currency.strip().upper()
        if len(target) != 3:
            raise ValidationFailed("Currency must be a 3-letter ISO code")

        base = report["base_currency"]
        rates = await rate_provider.get_rates(base, [target]) if target != base else RateTable(base=base)
        conversion = convert(Decimal(str(share["share_amount"])), base, target, rates)

        return {
            **share,
            "display_currency": target,
            "display_amount": float(quantize_money(conversion.converted)),
            "exchange_rate": float(round(conversion.rate, 6)),
        }


cost_forecast_service = CostForecastService()
