"""Generic pagination types shared by list endpoints.

PaginatedResponse[T]: Pydantic model for HTTP responses (serializable).
Paginated[T]:         plain dataclass for service-layer returns (not serializable).
"""

from dataclasses import dataclass

from pydantic import BaseModel


class PaginatedResponse[T](BaseModel):
    """Pydantic model for paginated HTTP responses.

    ``from_attributes`` lets ``model_validate`` read a ``Paginated`` dataclass
    directly::

        AccommodationCardListResponse = PaginatedResponse[AccommodationCardResponse]
        return AccommodationCardListResponse.model_validate(result)
    """

    model_config = {"from_attributes": True}

    items: list[T]
    total: int
    skip: int
    limit: int


@dataclass
class Paginated[T]:
    """A page of results inside the service layer.

    Services return this instead of the Pydantic model so they stay free of
    serialization concerns; routers convert it at the HTTP boundary.
    """

    items: list[T]
    total: int
    skip: int
    limit: int
