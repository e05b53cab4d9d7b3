"""SQLAlchemy models for the hosted booking schema.

Read-only views of the tables the pricing and availability code consumes.
Column names follow the hosted backend so queries run unchanged against it.
"""

import datetime as dt
import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tripbook.db.session import Base


class TimestampMixin:
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Accommodation(TimestampMixin, Base):
    __tablename__ = "accommodations"
    __table_args__ = (
        CheckConstraint("price_per_night >= 0", name="price_per_night_non_negative"),
        CheckConstraint("min_stay IS NULL OR min_stay >= 1", name="min_stay_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200))
    property_type: Mapped[str] = mapped_column(String(50))
    city: Mapped[str] = mapped_column(String(100))
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    cleaning_fee: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    min_stay: Mapped[int | None]
    max_stay: Mapped[int | None]
    is_active: Mapped[bool] = mapped_column(default=True)

    rooms: Mapped[list["Room"]] = relationship(back_populates="accommodation")


class Room(TimestampMixin, Base):
    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("price_per_night >= 0", name="price_per_night_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    accommodation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accommodations.id"), index=True
    )
    room_number: Mapped[str] = mapped_column(String(20))
    name: Mapped[str] = mapped_column(String(100))
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    is_active: Mapped[bool] = mapped_column(default=True)

    accommodation: Mapped["Accommodation"] = relationship(back_populates="rooms")


class Vehicle(TimestampMixin, Base):
    __tablename__ = "vehicles"
    __table_args__ = (
        CheckConstraint("price_per_day >= 0", name="price_per_day_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200))
    vehicle_type: Mapped[str] = mapped_column(String(50))
    city: Mapped[str] = mapped_column(String(100))
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    cleaning_fee: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    insurance_included: Mapped[bool] = mapped_column(default=False)
    is_active: Mapped[bool] = mapped_column(default=True)


class SupplierPricingRule(TimestampMixin, Base):
    """A supplier-defined price adjustment for one listing (or one room).

    ``adjustment_value`` is signed: negative lowers the price, positive raises
    it. ``percentage`` values are percents of the nightly price, ``fixed``
    values are currency amounts. ``discount`` rules always lower the price, and
    a ``fixed`` ``flat_override`` rule sets the nightly price outright.
    """

    __tablename__ = "supplier_pricing_rules"
    __table_args__ = (
        CheckConstraint(
            "adjustment_type IN ('percentage', 'fixed')", name="adjustment_type_valid"
        ),
        CheckConstraint(
            "start_date IS NULL OR end_date IS NULL OR start_date <= end_date",
            name="window_ordered",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    accommodation_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("accommodations.id"), index=True
    )
    vehicle_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("vehicles.id"), index=True)
    room_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("rooms.id"))
    rule_type: Mapped[str] = mapped_column(String(30))
    adjustment_type: Mapped[str] = mapped_column(String(20))
    adjustment_value: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    start_date: Mapped[dt.date | None] = mapped_column(Date)
    end_date: Mapped[dt.date | None] = mapped_column(Date)
    days_of_week: Mapped[list[Any] | None] = mapped_column(JSON)
    min_nights: Mapped[int | None]
    max_nights: Mapped[int | None]
    min_days_before: Mapped[int | None]
    max_days_before: Mapped[int | None]
    priority: Mapped[int] = mapped_column(default=0)
    is_active: Mapped[bool] = mapped_column(default=True)


class CalendarDay(TimestampMixin, Base):
    """One day of a listing's availability calendar."""

    __tablename__ = "availability_calendar"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    accommodation_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("accommodations.id"), index=True
    )
    vehicle_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("vehicles.id"), index=True)
    room_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("rooms.id"))
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    is_available: Mapped[bool]
    price_override: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    minimum_stay: Mapped[int | None]
    maximum_stay: Mapped[int | None]


class AdminFeeConfig(TimestampMixin, Base):
    """Platform-wide fee (service fee, taxes) applied at booking time."""

    __tablename__ = "admin_fees"
    __table_args__ = (
        CheckConstraint("fee_type IN ('percentage', 'fixed')", name="fee_type_valid"),
        CheckConstraint(
            "applies_to IN ('accommodation', 'vehicle', 'both')", name="applies_to_valid"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100))
    fee_type: Mapped[str] = mapped_column(String(20))
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    applies_to: Mapped[str] = mapped_column(String(20))
    calculation_type: Mapped[str] = mapped_column(String(20), default="booking")
    is_active: Mapped[bool] = mapped_column(default=True)
