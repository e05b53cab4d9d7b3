"""Stay and rental quotes.

Combines availability, per-night pricing and platform fees into the numbers a
booking modal shows before the guest confirms. Quotes are advisory: the hosted
backend re-validates at booking time.
"""

import datetime as dt
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import StrEnum

from sqlalchemy.ext.asyncio import AsyncSession

from tripbook.config import settings
from tripbook.exceptions import NotFoundError
from tripbook.logging import get_logger
from tripbook.models import Accommodation
from tripbook.pricing.availability import (
    is_date_range_available,
    meets_minimum_stay,
    within_maximum_stay,
)
from tripbook.pricing.fees import FeeBreakdown, calculate_booking_fees, insurance_fee
from tripbook.pricing.resolver import ZERO
from tripbook.pricing.stay import StayPrice, price_stay
from tripbook.pricing.types import AvailabilityRecord, PricingRule, Stay
from tripbook.repositories.availability import list_admin_fees, list_calendar
from tripbook.repositories.listing import get_accommodation, get_room, get_vehicle
from tripbook.repositories.pricing import (
    get_room_price_info,
    list_pricing_rules,
    list_room_pricing_rules,
)
from tripbook.services.pricing import is_hotel_type

logger = get_logger(__name__)


class UnavailableReason(StrEnum):
    INVALID_RANGE = "invalid_range"
    DATES_UNAVAILABLE = "dates_unavailable"
    MIN_STAY_NOT_MET = "min_stay_not_met"
    MAX_STAY_EXCEEDED = "max_stay_exceeded"


@dataclass
class StayQuote:
    listing_id: uuid.UUID
    check_in: dt.date
    check_out: dt.date
    available: bool
    unavailable_reason: UnavailableReason | None
    price: StayPrice
    fees: FeeBreakdown
    room_id: uuid.UUID | None = None


EMPTY_FEES = FeeBreakdown(
    base=ZERO, cleaning_fee=ZERO, service_fee=ZERO, taxes=ZERO, insurance_fee=ZERO, total=ZERO
)


def unavailable_reason(
    stay: Stay,
    calendar: Sequence[AvailabilityRecord],
    *,
    min_stay: int | None = None,
    max_stay: int | None = None,
) -> UnavailableReason | None:
    """First reason the stay cannot be booked, or None if it can."""
    if not stay.is_valid:
        return UnavailableReason.INVALID_RANGE
    if not is_date_range_available(stay.check_in, stay.check_out, calendar):
        return UnavailableReason.DATES_UNAVAILABLE
    if not meets_minimum_stay(stay.check_in, stay.check_out, calendar, min_stay=min_stay):
        return UnavailableReason.MIN_STAY_NOT_MET
    if not within_maximum_stay(stay.check_in, stay.check_out, calendar, max_stay=max_stay):
        return UnavailableReason.MAX_STAY_EXCEEDED
    return None


def _invalid_quote(
    listing_id: uuid.UUID, stay: Stay, base_price: Decimal, room_id: uuid.UUID | None = None
) -> StayQuote:
    return StayQuote(
        listing_id=listing_id,
        check_in=stay.check_in,
        check_out=stay.check_out,
        available=False,
        unavailable_reason=UnavailableReason.INVALID_RANGE,
        price=price_stay(stay, base_price, None, None, on=stay.check_in),
        fees=EMPTY_FEES,
        room_id=room_id,
    )


async def _nightly_pricing(
    db: AsyncSession, accommodation: Accommodation, room_id: uuid.UUID | None
) -> tuple[Decimal, list[PricingRule], bool]:
    """Base nightly price, rules, and whether calendar price overrides apply.

    A chosen room is priced from its own rate with its rules plus the hotel's.
    A hotel with rooms and no chosen room is quoted from its cheapest room,
    matching the "from" price on its card. Calendar overrides are listing
    prices, so they only apply when the listing's own rate is used.
    """
    if room_id is not None:
        room = await get_room(db, accommodation.id, room_id)
        if room is None:
            raise NotFoundError("Room", room_id)
        rules = await list_room_pricing_rules(db, accommodation.id, room_id)
        return room.price_per_night, rules, False

    rules = await list_pricing_rules(db, accommodation_id=accommodation.id)
    if is_hotel_type(accommodation):
        rooms = await get_room_price_info(db, accommodation.id)
        if rooms.has_rooms and rooms.lowest_price is not None:
            return rooms.lowest_price, rules, False
    return accommodation.price_per_night, rules, True


async def quote_accommodation_stay(
    db: AsyncSession,
    accommodation_id: uuid.UUID,
    check_in: dt.date,
    check_out: dt.date,
    today: dt.date,
    room_id: uuid.UUID | None = None,
) -> StayQuote:
    accommodation = await get_accommodation(db, accommodation_id)
    if accommodation is None:
        raise NotFoundError("Accommodation", accommodation_id)

    base_price, rules, calendar_prices = await _nightly_pricing(db, accommodation, room_id)
    stay = Stay(check_in=check_in, check_out=check_out)
    if not stay.is_valid:
        return _invalid_quote(accommodation_id, stay, base_price, room_id)

    calendar = await list_calendar(db, check_in, check_out, accommodation_id=accommodation_id)
    admin_fees = await list_admin_fees(db, "accommodation")

    reason = unavailable_reason(
        stay, calendar, min_stay=accommodation.min_stay, max_stay=accommodation.max_stay
    )
    priced_calendar = (
        calendar if calendar_prices else [replace(day, price_override=None) for day in calendar]
    )
    price = price_stay(stay, base_price, rules, priced_calendar, on=today)
    fees = calculate_booking_fees(price.subtotal, accommodation.cleaning_fee, admin_fees)

    logger.info(
        "stay_quoted",
        accommodation_id=str(accommodation_id),
        room_id=str(room_id) if room_id is not None else None,
        nights=price.nights,
        available=reason is None,
        unavailable_reason=reason,
        total=str(fees.total),
    )
    return StayQuote(
        listing_id=accommodation_id,
        check_in=check_in,
        check_out=check_out,
        available=reason is None,
        unavailable_reason=reason,
        price=price,
        fees=fees,
        room_id=room_id,
    )


async def quote_vehicle_rental(
    db: AsyncSession,
    vehicle_id: uuid.UUID,
    pickup: dt.date,
    dropoff: dt.date,
    today: dt.date,
) -> StayQuote:
    """Quote a rental from ``pickup`` to ``dropoff``; the dropoff day is not charged."""
    vehicle = await get_vehicle(db, vehicle_id)
    if vehicle is None:
        raise NotFoundError("Vehicle", vehicle_id)

    stay = Stay(check_in=pickup, check_out=dropoff)
    if not stay.is_valid:
        return _invalid_quote(vehicle_id, stay, vehicle.price_per_day)

    calendar = await list_calendar(db, pickup, dropoff, vehicle_id=vehicle_id)
    rules = await list_pricing_rules(db, vehicle_id=vehicle_id)
    admin_fees = await list_admin_fees(db, "vehicle")

    reason = unavailable_reason(stay, calendar)
    price = price_stay(stay, vehicle.price_per_day, rules, calendar, on=today)
    insurance = insurance_fee(
        price.subtotal, settings.vehicle_insurance_rate, included=vehicle.insurance_included
    )
    fees = calculate_booking_fees(
        price.subtotal, vehicle.cleaning_fee, admin_fees, insurance=insurance
    )

    logger.info(
        "rental_quoted",
        vehicle_id=str(vehicle_id),
        days=price.nights,
        available=reason is None,
        unavailable_reason=reason,
        total=str(fees.total),
    )
    return StayQuote(
        listing_id=vehicle_id,
        check_in=pickup,
        check_out=dropoff,
        available=reason is None,
        unavailable_reason=reason,
        price=price,
        fees=fees,
    )
