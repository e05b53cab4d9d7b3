"""Vehicle rental price and quote endpoints."""

import datetime as dt
import uuid

from fastapi import APIRouter, Query

from tripbook.dependencies import DB, Today
from tripbook.schemas.pricing import ListingPriceResponse
from tripbook.schemas.quote import StayQuoteResponse
from tripbook.services.pricing import get_vehicle_display_price
from tripbook.services.quote import quote_vehicle_rental

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("/{vehicle_id}/price", response_model=ListingPriceResponse, status_code=200)
async def get_price(vehicle_id: uuid.UUID, db: DB, today: Today) -> ListingPriceResponse:
    """Daily display price for one vehicle."""
    result = await get_vehicle_display_price(db, vehicle_id, today)
    return ListingPriceResponse.model_validate(result)


@router.get("/{vehicle_id}/quote", response_model=StayQuoteResponse, status_code=200)
async def get_quote(
    vehicle_id: uuid.UUID,
    db: DB,
    today: Today,
    pickup: dt.date = Query(...),
    dropoff: dt.date = Query(...),
) -> StayQuoteResponse:
    """Availability, daily pricing, insurance and fees for a rental."""
    result = await quote_vehicle_rental(db, vehicle_id, pickup, dropoff, today)
    return StayQuoteResponse.model_validate(result)
