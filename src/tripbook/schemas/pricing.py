"""Display price response schemas.

Money fields are Decimals rounded half up to cents and serialized as strings
(e.g. "80.00"). ``headline_price`` is the whole-unit figure cards show.
"""

import uuid
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, computed_field

from tripbook.pricing.resolver import breakdown_amount, headline_price
from tripbook.schemas.pagination import PaginatedResponse

Money = Annotated[Decimal, AfterValidator(breakdown_amount)]


class DisplayPriceResponse(BaseModel):
    model_config = {"from_attributes": True}

    display_price: Money
    original_price: Money | None
    discount_percentage: int | None
    has_discount: bool
    show_from_label: bool

    @computed_field  # type: ignore[prop-decorator]
    @property
    def headline_price(self) -> int:
        return headline_price(self.display_price)


class ListingPriceResponse(BaseModel):
    """Display price for a single accommodation or vehicle."""

    model_config = {"from_attributes": True}

    listing_id: uuid.UUID
    price: DisplayPriceResponse


class AccommodationCardResponse(BaseModel):
    """Accommodation summary with its resolved price, as shown on search cards."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    title: str
    city: str
    property_type: str
    price: DisplayPriceResponse


AccommodationCardListResponse = PaginatedResponse[AccommodationCardResponse]
