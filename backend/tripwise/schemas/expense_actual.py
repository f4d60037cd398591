import uuid
from datetime import date

from pydantic import BaseModel, Field


class ExpenseActualResponse(BaseModel):
    actual_id: str
    expense_id: str
    traveler_id: str
    installment_number: int
    actual_amount: float
    actual_date: str | None
    paid_by_traveler_id: str | None
    payment_method_key: str | None
    receipt_url: str | None
    actual_notes: str | None
    expense_description: str
    expense_currency: str
    estimated_amount: float
    traveler_name: str
    paid_by_name: str | None


class UpdateActualRequest(BaseModel):
    actual_amount: float | None = Field(default=None, ge=0)
    actual_date: date | None = None
    paid_by_traveler_id: uuid.UUID | None = None
    payment_method_key: str | None = Field(default=None, max_length=100)
    receipt_url: str | None = None
    actual_notes: str | None = None


class TransferResponse(BaseModel):
    success: bool
    transferred_count: int
    message: str


class ResetResponse(BaseModel):
    success: bool
    deleted_count: int
    message: str


class TravelerBalanceResponse(BaseModel):
    traveler_id: str
    traveler_name: str
    should_pay: float
    actually_paid: float
    balance: float


class SettlementResponse(BaseModel):
    from_traveler_id: str
    from_name: str
    to_traveler_id: str
    to_name: str
    amount: float


class SettlementSummaryResponse(BaseModel):
    total_estimated: float
    total_actual: float
    variance: float
    travelers: list[TravelerBalanceResponse]
    settlements: list[SettlementResponse]
