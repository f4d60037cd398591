import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.dependencies import get_trip
from tripwise.models.adhoc_expense import AdhocExpense
from tripwise.models.trip import Trip
from tripwise.routers.common import currency_code, money
from tripwise.schemas.adhoc_expense import (
    AdhocExpenseCreate,
    AdhocExpenseResponse,
    AdhocExpenseUpdate,
)

router = APIRouter()


async def _get_expense(db: AsyncSession, trip_id: uuid.UUID, expense_id: uuid.UUID) -> AdhocExpense:
    result = await db.execute(
        select(AdhocExpense).where(AdhocExpense.id == expense_id, AdhocExpense.trip_id == trip_id)
    )
    expense = result.scalar_one_or_none()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.get("/{trip_id}/adhoc-expenses", response_model=list[AdhocExpenseResponse])
async def list_adhoc_expenses(
    include_inactive: bool = True,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    query = select(AdhocExpense).where(AdhocExpense.trip_id == trip.id)
    if not include_inactive:
        query = query.where(AdhocExpense.is_active.is_(True))
    result = await db.execute(query.order_by(AdhocExpense.expense_date, AdhocExpense.created_at))
    return [AdhocExpenseResponse.model_validate(e) for e in result.scalars().all()]


@router.post("/{trip_id}/adhoc-expenses", status_code=201, response_model=AdhocExpenseResponse)
async def create_adhoc_expense(
    req: AdhocExpenseCreate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    expense = AdhocExpense(
        trip_id=trip.id,
        **{
            **req.model_dump(),
            "amount": money(req.amount),
            "currency_code": currency_code(req.currency_code),
        },
    )
    db.add(expense)
    await db.commit()
    await db.refresh(expense)
    return AdhocExpenseResponse.model_validate(expense)


@router.get("/{trip_id}/adhoc-expenses/{expense_id}", response_model=AdhocExpenseResponse)
async def get_adhoc_expense(
    expense_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    return AdhocExpenseResponse.model_validate(await _get_expense(db, trip.id, expense_id))


@router.put("/{trip_id}/adhoc-expenses/{expense_id}", response_model=AdhocExpenseResponse)
async def update_adhoc_expense(
    expense_id: uuid.UUID,
    req: AdhocExpenseUpdate,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    expense = await _get_expense(db, trip.id, expense_id)
    changes = req.model_dump(exclude_unset=True)

    for field in ("name", "amount", "currency_code", "is_active"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
    if "amount" in changes:
        changes["amount"] = money(changes["amount"])
    if "currency_code" in changes:
        changes["currency_code"] = currency_code(changes["currency_code"])

    for field, value in changes.items():
        setattr(expense, field, value)

    await db.commit()
    await db.refresh(expense)
    return AdhocExpenseResponse.model_validate(expense)


@router.delete("/{trip_id}/adhoc-expenses/{expense_id}", status_code=204)
async def delete_adhoc_expense(
    expense_id: uuid.UUID,
    trip: Trip = Depends(get_trip),
    db: AsyncSession = Depends(get_db),
):
    expense = await _get_expense(db, trip.id, expense_id)
    await db.delete(expense)
    await db.commit()
