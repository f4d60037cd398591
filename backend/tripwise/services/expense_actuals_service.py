"""Expense actuals: forecast-to-actuals transfer, edits, reset and settlement.

Lifecycle per trip: no actuals -> transfer -> actuals (edited any number of
times) -> reset -> no actuals. Transfer and reset each commit once, so a
failure leaves the previous state untouched.
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from tripwise.errors import ActualsStateConflict, NotFound, ValidationFailed
from tripwise.models.expense import Expense, ExpenseActual, ExpenseSplit
from tripwise.models.trip import Traveler
from tripwise.services.cost_forecast_service import count_actuals, load_trip, load_travelers
from tripwise.services.currency_service import quantize_money
from tripwise.services.settlement import net_balances, settle
from tripwise.services.traveler_shares import cost_sharers

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "actual_amount",
    "actual_date",
    "paid_by_traveler_id",
    "payment_method_key",
    "receipt_url",
    "actual_notes",
)


class ExpenseActualsService:

    # ─── Lifecycle ───

    async def transfer(self, db: AsyncSession, trip_id: uuid.UUID) -> int:
        """Create one actual per forecast split. Only valid while no actuals exist."""
        await load_trip(db, trip_id)

        if await count_actuals(db, trip_id):
            raise ActualsStateConflict(
                "Actuals have already been initialised for this trip. Reset them to transfer again."
            )

        result = await db.execute(
            select(ExpenseSplit)
            .join(Expense, ExpenseSplit.expense_id == Expense.id)
            .where(Expense.trip_id == trip_id)
            .order_by(Expense.created_at, Expense.id, ExpenseSplit.traveler_id)
        )
        splits = result.scalars().all()
        if not splits:
            raise ActualsStateConflict(
                "No cost forecast to transfer. Collect costs for this trip first."
            )

        try:
            for split in splits:
                db.add(ExpenseActual(
                    expense_id=split.expense_id,
                    traveler_id=split.traveler_id,
                    installment_number=1,
                    actual_amount=split.estimated_split_amount,
                ))
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception(f"Transfer to actuals failed for trip {trip_id}; rolled back")
            raise

        logger.info(f"Transferred {len(splits)} forecast splits to actuals for trip {trip_id}")
        return len(splits)

    async def reset(self, db: AsyncSession, trip_id: uuid.UUID) -> int:
        """Delete every actual of the trip. Returns how many were removed."""
        await load_trip(db, trip_id)
        count = await count_actuals(db, trip_id)

        try:
            trip_expenses = select(Expense.id).where(Expense.trip_id == trip_id)
            await db.execute(delete(ExpenseActual).where(ExpenseActual.expense_id.in_(trip_expenses)))
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception(f"Reset of actuals failed for trip {trip_id}; rolled back")
            raise

        logger.info(f"Reset {count} actuals for trip {trip_id}")
        return count

    # ─── Queries ───

    def _joined_query(self, trip_id: uuid.UUID):
        owner = aliased(Traveler)
        payer = aliased(Traveler)
        return (
            select(
                ExpenseActual,
                Expense.description,
                Expense.currency,
                Expense.estimated_amount,
                owner.name,
                payer.name,
            )
            .join(Expense, ExpenseActual.expense_id == Expense.id)
            .join(owner, ExpenseActual.traveler_id == owner.id)
            .outerjoin(payer, ExpenseActual.paid_by_traveler_id == payer.id)
            .where(Expense.trip_id == trip_id)
        )

    @staticmethod
    def _row_to_dict(row) -> dict:
        actual, description, currency, estimated, traveler_name, paid_by_name = row
        return {
            "actual_id": str(actual.id),
            "expense_id": str(actual.expense_id),
            "traveler_id": str(actual.traveler_id),
            "installment_number": actual.installment_number,
            "actual_amount": float(actual.actual_amount),
            "actual_date": actual.actual_date.isoformat() if actual.actual_date else None,
            "paid_by_traveler_id": str(actual.paid_by_traveler_id) if actual.paid_by_traveler_id else None,
            "payment_method_key": actual.payment_method_key,
            "receipt_url": actual.receipt_url,
            "actual_notes": actual.actual_notes,
            "expense_description": description,
            "expense_currency": currency,
            "estimated_amount": float(estimated),
            "traveler_name": traveler_name,
            "paid_by_name": paid_by_name,
        }

    async def list_actuals(
        self,
        db: AsyncSession,
        trip_id: uuid.UUID,
        traveler_id: uuid.UUID | None = None,
        paid_by: uuid.UUID | None = None,
    ) -> list[dict]:
        await load_trip(db, trip_id)
        query = self._joined_query(trip_id)
        if traveler_id:
            query = query.where(ExpenseActual.traveler_id == traveler_id)
        if paid_by:
            query = query.where(ExpenseActual.paid_by_traveler_id == paid_by)
        query = query.order_by(Expense.description, ExpenseActual.traveler_id, ExpenseActual.installment_number)

        result = await db.execute(query)
        return [self._row_to_dict(row) for row in result.all()]

    async def get_actual(self, db: AsyncSession, trip_id: uuid.UUID, actual_id: uuid.UUID) -> dict:
        result = await db.execute(self._joined_query(trip_id).where(ExpenseActual.id == actual_id))
        row = result.first()
        if row is None:
            raise NotFound("Actual not found")
        return self._row_to_dict(row)

    # ─── Edits ───

    async def update_actual(
        self, db: AsyncSession, trip_id: uuid.UUID, actual_id: uuid.UUID, changes: dict
    ) -> dict:
        result = await db.execute(
            select(ExpenseActual)
            .join(Expense, ExpenseActual.expense_id == Expense.id)
            .where(ExpenseActual.id == actual_id, Expense.trip_id == trip_id)
        )
        actual = result.scalar_one_or_none()
        if not actual:
            raise NotFound("Actual not found")

        if "actual_amount" in changes:
            amount = changes["actual_amount"]
            if amount is None:
                raise ValidationFailed("actual_amount is required")
            if Decimal(str(amount)) < 0:
                raise ValidationFailed("actual_amount must not be negative")
            changes["actual_amount"] = quantize_money(Decimal(str(amount)))

        payer_id = changes.get("paid_by_traveler_id")
        if payer_id is not None:
            payer = await db.get(Traveler, payer_id)
            if not payer or payer.trip_id != trip_id:
                raise ValidationFailed("paid_by_traveler_id is not a traveler on this trip")

        for field in EDITABLE_FIELDS:
            if field in changes:
                setattr(actual, field, changes[field])

        await db.commit()
        return await self.get_actual(db, trip_id, actual_id)

    # ─── Settlement ───

    async def settlement_summary(self, db: AsyncSession, trip_id: uuid.UUID) -> dict:
        await load_trip(db, trip_id)
        travelers = await load_travelers(db, trip_id)

        total_estimated = await db.scalar(
            select(func.coalesce(func.sum(ExpenseSplit.estimated_split_amount), 0))
            .join(Expense, ExpenseSplit.expense_id == Expense.id)
            .where(Expense.trip_id == trip_id)
        )

        result = await db.execute(
            select(ExpenseActual)
            .join(Expense, ExpenseActual.expense_id == Expense.id)
            .where(Expense.trip_id == trip_id, ExpenseActual.paid_by_traveler_id.is_not(None))
        )
        paid_rows = result.scalars().all()

        balances = net_balances(cost_sharers(travelers), paid_rows)
        total_actual = sum((row.actual_amount for row in paid_rows), Decimal("0"))
        total_estimated = Decimal(str(total_estimated))
        transfers = settle(balances)

        return {
            "total_estimated": float(quantize_money(total_estimated)),
            "total_actual": float(quantize_money(total_actual)),
            "variance": float(quantize_money(total_actual - total_estimated)),
            "travelers": [b.to_dict() for b in balances],
            "settlements": [t.to_dict() for t in transfers],
        }


expense_actuals_service = ExpenseActualsService()
