import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field


class AdhocExpenseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    amount: float = Field(ge=0)
    currency_code: str = Field(min_length=3, max_length=3)
    expense_date: date | None = None
    category: str | None = None
    is_active: bool = True
    notes: str | None = None


class AdhocExpenseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    amount: float | None = Field(default=None, ge=0)
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    expense_date: date | None = None
    category: str | None = None
    is_active: bool | None = None
    notes: str | None = None


class AdhocExpenseResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    name: str
    description: str | None
    amount: float
    currency_code: str | None
    expense_date: date | None
    category: str | None
    is_active: bool
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
