import uuid
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Table, Text, Time, Uuid, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tripwise.database import Base
from tripwise.models.enums import ItemStatus, enum_type
from tripwise.models.trip import Traveler

accommodation_option_travelers = Table(
    "accommodation_option_travelers",
    Base.metadata,
    Column(
        "accommodation_option_id", Uuid,
        ForeignKey("accommodation_options.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column("traveler_id", Uuid, ForeignKey("trip_travelers.id", ondelete="CASCADE"), primary_key=True),
)


class AccommodationOption(Base):
    __tablename__ = "accommodation_options"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type_name: Mapped[str | None] = mapped_column(String(50))
    name: Mapped[str | None] = mapped_column(String(255))
    address: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(255))
    check_in_date: Mapped[date | None] = mapped_column(Date)
    check_in_time: Mapped[time | None] = mapped_column(Time)
    check_out_date: Mapped[date | None] = mapped_column(Date)
    check_out_time: Mapped[time | None] = mapped_column(Time)
    num_rooms: Mapped[int] = mapped_column(Integer, default=1)
    price_per_night: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    total_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    currency_code: Mapped[str | None] = mapped_column(String(3))
    status: Mapped[ItemStatus] = mapped_column(enum_type(ItemStatus), default=ItemStatus.DRAFT)
    booking_reference: Mapped[str | None] = mapped_column(String(100))
    booking_source: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    travelers: Mapped[list[Traveler]] = relationship(
        secondary=accommodation_option_travelers, lazy="selectin"
    )

    @property
    def nights(self) -> int | None:
        if self.check_in_date and self.check_out_date:
            return max((self.check_out_date - self.check_in_date).days, 0)
        return None
