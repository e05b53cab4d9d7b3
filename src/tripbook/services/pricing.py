"""Listing price business logic.

Fetches a listing's rules (and, for hotel-type listings, its lowest room
price), then hands everything to the pure resolver.
"""

import datetime as dt
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from tripbook.config import settings
from tripbook.exceptions import NotFoundError
from tripbook.logging import get_logger
from tripbook.models import Accommodation
from tripbook.pricing.resolver import resolve_display_price
from tripbook.pricing.types import DisplayPrice, RoomPriceInfo
from tripbook.repositories.listing import (
    count_accommodations,
    get_accommodation,
    get_vehicle,
    list_accommodations,
)
from tripbook.repositories.pricing import (
    get_lowest_room_prices,
    get_room_price_info,
    list_pricing_rules,
    list_pricing_rules_by_accommodation,
)
from tripbook.schemas.pagination import Paginated

logger = get_logger(__name__)

NO_ROOMS = RoomPriceInfo(has_rooms=False, lowest_price=None)


@dataclass
class ListingPrice:
    listing_id: uuid.UUID
    price: DisplayPrice


@dataclass
class AccommodationCard:
    """Search/browse card: listing summary plus its resolved display price."""

    id: uuid.UUID
    title: str
    city: str
    property_type: str
    price: DisplayPrice


def is_hotel_type(accommodation: Accommodation) -> bool:
    return accommodation.property_type.lower() in settings.hotel_property_types


async def get_accommodation_display_price(
    db: AsyncSession, accommodation_id: uuid.UUID, today: dt.date
) -> ListingPrice:
    accommodation = await get_accommodation(db, accommodation_id)
    if accommodation is None:
        raise NotFoundError("Accommodation", accommodation_id)

    rules = await list_pricing_rules(db, accommodation_id=accommodation_id)
    rooms = NO_ROOMS
    if is_hotel_type(accommodation):
        rooms = await get_room_price_info(db, accommodation_id)
    price = resolve_display_price(
        accommodation.price_per_night, rules, rooms.has_rooms, rooms.lowest_price, on=today
    )
    logger.info(
        "display_price_resolved",
        accommodation_id=str(accommodation_id),
        rules=len(rules),
        has_rooms=rooms.has_rooms,
        has_discount=price.has_discount,
    )
    return ListingPrice(listing_id=accommodation_id, price=price)


async def get_vehicle_display_price(
    db: AsyncSession, vehicle_id: uuid.UUID, today: dt.date
) -> ListingPrice:
    vehicle = await get_vehicle(db, vehicle_id)
    if vehicle is None:
        raise NotFoundError("Vehicle", vehicle_id)

    rules = await list_pricing_rules(db, vehicle_id=vehicle_id)
    price = resolve_display_price(vehicle.price_per_day, rules, on=today)
    logger.info(
        "display_price_resolved",
        vehicle_id=str(vehicle_id),
        rules=len(rules),
        has_discount=price.has_discount,
    )
    return ListingPrice(listing_id=vehicle_id, price=price)


async def list_accommodation_cards(
    db: AsyncSession, skip: int, limit: int, today: dt.date
) -> Paginated[AccommodationCard]:
    """A page of accommodation cards with display prices.

    Four fixed queries per call (no N+1): the page, the total, rules for the
    page, and lowest room prices for the hotel-type listings on the page.
    """
    accommodations = await list_accommodations(db, skip, limit)
    total = await count_accommodations(db)

    ids = [accommodation.id for accommodation in accommodations]
    rules_by_id = await list_pricing_rules_by_accommodation(db, ids)
    rooms_by_id = await get_lowest_room_prices(
        db, [accommodation.id for accommodation in accommodations if is_hotel_type(accommodation)]
    )

    cards = []
    for accommodation in accommodations:
        rooms = rooms_by_id.get(accommodation.id, NO_ROOMS)
        price = resolve_display_price(
            accommodation.price_per_night,
            rules_by_id.get(accommodation.id, []),
            rooms.has_rooms,
            rooms.lowest_price,
            on=today,
        )
        cards.append(
            AccommodationCard(
                id=accommodation.id,
                title=accommodation.title,
                city=accommodation.city,
                property_type=accommodation.property_type,
                price=price,
            )
        )

    return Paginated(items=cards, total=total, skip=skip, limit=limit)
