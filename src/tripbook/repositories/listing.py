"""Accommodation and vehicle lookups.

Pure query functions: no business logic, no HTTP concerns.
"""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripbook.models import Accommodation, Room, Vehicle


async def get_accommodation(db: AsyncSession, accommodation_id: uuid.UUID) -> Accommodation | None:
    """Return an active accommodation, or None."""
    stmt = select(Accommodation).where(
        Accommodation.id == accommodation_id, Accommodation.is_active.is_(True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_accommodations(db: AsyncSession, skip: int, limit: int) -> list[Accommodation]:
    """Return a page of active accommodations, newest first."""
    stmt = (
        select(Accommodation)
        .where(Accommodation.is_active.is_(True))
        .order_by(Accommodation.created_at.desc(), Accommodation.id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_accommodations(db: AsyncSession) -> int:
    """Return the number of active accommodations."""
    stmt = select(func.count(Accommodation.id)).where(Accommodation.is_active.is_(True))
    result = await db.execute(stmt)
    return result.scalar_one()


async def get_vehicle(db: AsyncSession, vehicle_id: uuid.UUID) -> Vehicle | None:
    """Return an active vehicle, or None."""
    stmt = select(Vehicle).where(Vehicle.id == vehicle_id, Vehicle.is_active.is_(True))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_room(
    db: AsyncSession, accommodation_id: uuid.UUID, room_id: uuid.UUID
) -> Room | None:
    """Return an active room belonging to ``accommodation_id``, or None."""
    stmt = select(Room).where(
        Room.id == room_id,
        Room.accommodation_id == accommodation_id,
        Room.is_active.is_(True),
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()
