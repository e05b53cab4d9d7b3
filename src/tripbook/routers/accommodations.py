"""Accommodation price and quote endpoints."""

import datetime as dt
import uuid

from fastapi import APIRouter, Query

from tripbook.dependencies import DB, Today
from tripbook.schemas.pricing import AccommodationCardListResponse, ListingPriceResponse
from tripbook.schemas.quote import StayQuoteResponse
from tripbook.services.pricing import get_accommodation_display_price, list_accommodation_cards
from tripbook.services.quote import quote_accommodation_stay

router = APIRouter(prefix="/accommodations", tags=["accommodations"])


@router.get("", response_model=AccommodationCardListResponse, status_code=200)
async def list_cards(
    db: DB,
    today: Today,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
) -> AccommodationCardListResponse:
    """List paginated accommodation cards with their display prices."""
    result = await list_accommodation_cards(db, skip, limit, today)
    return AccommodationCardListResponse.model_validate(result)


@router.get("/{accommodation_id}/price", response_model=ListingPriceResponse, status_code=200)
async def get_price(accommodation_id: uuid.UUID, db: DB, today: Today) -> ListingPriceResponse:
    """Display price for one accommodation ("from" price for hotels with rooms)."""
    result = await get_accommodation_display_price(db, accommodation_id, today)
    return ListingPriceResponse.model_validate(result)


@router.get("/{accommodation_id}/quote", response_model=StayQuoteResponse, status_code=200)
async def get_quote(
    accommodation_id: uuid.UUID,
    db: DB,
    today: Today,
    check_in: dt.date = Query(...),
    check_out: dt.date = Query(...),
    room_id: uuid.UUID | None = Query(None),
) -> StayQuoteResponse:
    """Availability, nightly pricing and fees for a stay. Checkout night is not charged.

    Hotels quote ``room_id`` at its own rate, or their cheapest room when omitted.
    """
    result = await quote_accommodation_stay(
        db, accommodation_id, check_in, check_out, today, room_id=room_id
    )
    return StayQuoteResponse.model_validate(result)
