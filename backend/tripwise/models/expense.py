"""Forecast snapshot and actual-payment models."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tripwise.database import Base
from tripwise.models.enums import CostModule, enum_type


class CostForecast(Base):
    """Last collected forecast report for a trip. Overwritten on every collection."""

    __tablename__ = "cost_forecasts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    base_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status_filter: Mapped[list] = mapped_column(JSON, nullable=False)
    report: Mapped[dict] = mapped_column(JSON, nullable=False)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Expense(Base):
    """A forecast line item, already converted to the trip's base currency."""

    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True
    )
    module: Mapped[CostModule] = mapped_column(enum_type(CostModule), nullable=False)
    source_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    original_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    original_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    exchange_rate: Mapped[Decimal] = mapped_column(Numeric(18, 8), default=Decimal("1"))
    estimated_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    splits: Mapped[list["ExpenseSplit"]] = relationship(
        back_populates="expense", cascade="all, delete-orphan"
    )


class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    expense_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    traveler_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trip_travelers.id", ondelete="CASCADE"), nullable=False
    )
    estimated_split_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    expense: Mapped["Expense"] = relationship(back_populates="splits")


class ExpenseActual(Base):
    __tablename__ = "expense_actuals"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    expense_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    traveler_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trip_travelers.id", ondelete="CASCADE"), nullable=False
    )
    installment_number: Mapped[int] = mapped_column(Integer, default=1)
    actual_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    actual_date: Mapped[date | None] = mapped_column(Date)
    paid_by_traveler_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("trip_travelers.id", ondelete="SET NULL")
    )
    payment_method_key: Mapped[str | None] = mapped_column(String(100))
    receipt_url: Mapped[str | None] = mapped_column(Text)
    actual_notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    expense: Mapped["Expense"] = relationship()
