"""Expense actuals router: transfer, edit, reset and settlement."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.schemas.expense_actual import (
    ExpenseActualResponse,
    ResetResponse,
    SettlementSummaryResponse,
    TransferResponse,
    UpdateActualRequest,
)
from tripwise.services.expense_actuals_service import expense_actuals_service

router = APIRouter()


@router.get("/{trip_id}/expense-actuals", response_model=list[ExpenseActualResponse])
async def list_actuals(
    trip_id: uuid.UUID,
    traveler_id: uuid.UUID | None = None,
    paid_by: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
):
    return await expense_actuals_service.list_actuals(db, trip_id, traveler_id=traveler_id, paid_by=paid_by)


@router.post("/{trip_id}/expense-actuals/transfer", response_model=TransferResponse)
async def transfer_forecast(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Copy the forecast splits into editable actuals."""
    count = await expense_actuals_service.transfer(db, trip_id)
    return {
        "success": True,
        "transferred_count": count,
        "message": f"Transferred {count} expense items to actuals",
    }


@router.post("/{trip_id}/expense-actuals/reset", response_model=ResetResponse)
async def reset_actuals(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Delete every actual for the trip."""
    count = await expense_actuals_service.reset(db, trip_id)
    return {
        "success": True,
        "deleted_count": count,
        "message": f"Deleted {count} actuals",
    }


@router.get("/{trip_id}/expense-actuals/settlement", response_model=SettlementSummaryResponse)
async def settlement(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await expense_actuals_service.settlement_summary(db, trip_id)


@router.get("/{trip_id}/expense-actuals/{actual_id}", response_model=ExpenseActualResponse)
async def get_actual(trip_id: uuid.UUID, actual_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await expense_actuals_service.get_actual(db, trip_id, actual_id)


@router.put("/{trip_id}/expense-actuals/{actual_id}", response_model=ExpenseActualResponse)
async def update_actual(
    trip_id: uuid.UUID,
    actual_id: uuid.UUID,
    req: UpdateActualRequest,
    db: AsyncSession = Depends(get_db),
):
    return await expense_actuals_service.update_actual(
        db, trip_id, actual_id, req.model_dump(exclude_unset=True)
    )
