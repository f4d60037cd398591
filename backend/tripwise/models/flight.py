import uuid
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Table, Text, Time, Uuid, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tripwise.database import Base
from tripwise.models.enums import FlightType, ItemStatus, LegDirection, enum_type
from tripwise.models.trip import Traveler

flight_option_travelers = Table(
    "flight_option_travelers",
    Base.metadata,
    Column("flight_option_id", Uuid, ForeignKey("flight_options.id", ondelete="CASCADE"), primary_key=True),
    Column("traveler_id", Uuid, ForeignKey("trip_travelers.id", ondelete="CASCADE"), primary_key=True),
)


class FlightOption(Base):
    """One fare option. Round trips keep their return legs on the same row."""

    __tablename__ = "flight_options"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True
    )
    flight_type: Mapped[FlightType] = mapped_column(enum_type(FlightType), default=FlightType.ONE_WAY)
    unit_fare: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    return_fare: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    currency_code: Mapped[str | None] = mapped_column(String(3))
    status: Mapped[ItemStatus] = mapped_column(enum_type(ItemStatus), default=ItemStatus.DRAFT)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    legs: Mapped[list["FlightLeg"]] = relationship(
        back_populates="flight_option",
        cascade="all, delete-orphan",
        order_by="FlightLeg.leg_order",
        lazy="selectin",
    )
    travelers: Mapped[list[Traveler]] = relationship(
        secondary=flight_option_travelers, lazy="selectin"
    )

    @property
    def outbound_legs(self) -> list["FlightLeg"]:
        return [leg for leg in self.legs if leg.direction == LegDirection.OUTBOUND]

    @property
    def return_legs(self) -> list["FlightLeg"]:
        return [leg for leg in self.legs if leg.direction == LegDirection.RETURN]


class FlightLeg(Base):
    __tablename__ = "flight_legs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    flight_option_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("flight_options.id", ondelete="CASCADE"), nullable=False
    )
    direction: Mapped[LegDirection] = mapped_column(
        enum_type(LegDirection), default=LegDirection.OUTBOUND
    )
    leg_order: Mapped[int] = mapped_column(Integer, nullable=False)
    departure_airport: Mapped[str] = mapped_column(String(10), nullable=False)
    arrival_airport: Mapped[str] = mapped_column(String(10), nullable=False)
    departure_date: Mapped[date] = mapped_column(Date, nullable=False)
    departure_time: Mapped[time | None] = mapped_column(Time)
    arrival_date: Mapped[date] = mapped_column(Date, nullable=False)
    arrival_time: Mapped[time | None] = mapped_column(Time)
    airline: Mapped[str | None] = mapped_column(String(100))
    flight_number: Mapped[str | None] = mapped_column(String(20))
    stops_count: Mapped[int] = mapped_column(Integer, default=0)
    duration_minutes: Mapped[int | None] = mapped_column(Integer)

    flight_option: Mapped["FlightOption"] = relationship(back_populates="legs")
