"""Stay and rental quote response schemas."""

import datetime as dt
import uuid

from pydantic import BaseModel

from tripbook.schemas.pricing import Money
from tripbook.services.quote import UnavailableReason


class NightPriceResponse(BaseModel):
    model_config = {"from_attributes": True}

    date: dt.date
    base: Money
    price: Money
    rule_id: str | None


class StayPriceResponse(BaseModel):
    """Pre-fee pricing; ``original_subtotal`` is base price times nights."""

    model_config = {"from_attributes": True}

    nights: int
    subtotal: Money
    original_subtotal: Money
    discount_amount: Money
    discount_percentage: int
    has_discount: bool
    average_nightly_price: Money
    breakdown: list[NightPriceResponse]


class FeeBreakdownResponse(BaseModel):
    model_config = {"from_attributes": True}

    base: Money
    cleaning_fee: Money
    service_fee: Money
    taxes: Money
    insurance_fee: Money
    total: Money


class StayQuoteResponse(BaseModel):
    """Quote for a stay (accommodations) or a rental (vehicles)."""

    model_config = {"from_attributes": True}

    listing_id: uuid.UUID
    check_in: dt.date
    check_out: dt.date
    available: bool
    unavailable_reason: UnavailableReason | None
    price: StayPriceResponse
    fees: FeeBreakdownResponse
    room_id: uuid.UUID | None = None
