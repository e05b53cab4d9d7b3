"""Availability calendar and admin fee queries."""

import datetime as dt
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripbook.models import AdminFeeConfig, CalendarDay
from tripbook.pricing.types import AdminFee, AvailabilityRecord


def to_availability_record(row: CalendarDay) -> AvailabilityRecord:
    return AvailabilityRecord(
        date=row.date,
        is_available=row.is_available,
        price_override=row.price_override,
        minimum_stay=row.minimum_stay,
        maximum_stay=row.maximum_stay,
    )


async def list_calendar(
    db: AsyncSession,
    start: dt.date,
    end: dt.date,
    *,
    accommodation_id: uuid.UUID | None = None,
    vehicle_id: uuid.UUID | None = None,
) -> list[AvailabilityRecord]:
    """Calendar records in ``[start, end)`` for one listing, ordered by date.

    Room-level rows are excluded for accommodations. Days without a row are
    simply missing from the result; callers treat them as unavailable.
    """
    if start >= end:
        return []
    stmt = (
        select(CalendarDay)
        .where(CalendarDay.date >= start, CalendarDay.date < end)
        .order_by(CalendarDay.date, CalendarDay.updated_at)
    )
    if accommodation_id is not None:
        stmt = stmt.where(
            CalendarDay.accommodation_id == accommodation_id, CalendarDay.room_id.is_(None)
        )
    elif vehicle_id is not None:
        stmt = stmt.where(CalendarDay.vehicle_id == vehicle_id)
    else:
        return []

    result = await db.execute(stmt)
    return [to_availability_record(row) for row in result.scalars().all()]


async def list_admin_fees(db: AsyncSession, applies_to: str) -> list[AdminFee]:
    """Active booking-time fees for ``accommodation`` or ``vehicle`` (plus ``both``)."""
    stmt = (
        select(AdminFeeConfig)
        .where(
            AdminFeeConfig.is_active.is_(True),
            AdminFeeConfig.calculation_type == "booking",
            AdminFeeConfig.applies_to.in_(["both", applies_to]),
        )
        .order_by(AdminFeeConfig.name)
    )
    result = await db.execute(stmt)
    return [
        AdminFee(name=row.name, fee_type=row.fee_type, amount=row.amount)
        for row in result.scalars().all()
    ]
