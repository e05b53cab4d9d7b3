"""Calendar-based availability checks and date-range pricing.

The calendar is fail-closed: a day with no record is NOT available. Suppliers
populate the calendar ahead of time, so a missing day means we do not know,
and not knowing must never turn into a double booking.

Ranges follow stay semantics: ``start`` inclusive, ``end`` exclusive. The
checkout (or vehicle return) day itself is not occupied.
"""

from collections.abc import Iterable, Iterator, Mapping
from datetime import date, timedelta
from decimal import Decimal

from tripbook.pricing.resolver import ZERO, to_decimal
from tripbook.pricing.types import AvailabilityRecord

type Calendar = Iterable[AvailabilityRecord] | Mapping[date, AvailabilityRecord]

ONE_DAY = timedelta(days=1)


def index_calendar(calendar: Calendar | None) -> Mapping[date, AvailabilityRecord]:
    """Key records by day. Later records for the same day replace earlier ones."""
    if calendar is None:
        return {}
    if isinstance(calendar, Mapping):
        return calendar
    return {record.date: record for record in calendar}


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day in ``[start, end)``. Empty when ``start >= end``."""
    day = start
    while day < end:
        yield day
        day += ONE_DAY


def is_date_available(day: date, calendar: Calendar | None) -> bool:
    """True only if the calendar has a record for ``day`` marked available."""
    record = index_calendar(calendar).get(day)
    if record is None:
        return False
    return record.is_available is True


def is_date_range_available(start: date, end: date, calendar: Calendar | None) -> bool:
    """True if every day in ``[start, end)`` is available.

    A zero-length or inverted range is never available. Stops at the first
    blocked day.
    """
    if start >= end:
        return False
    index = index_calendar(calendar)
    return all(is_date_available(day, index) for day in iter_days(start, end))


def date_price(day: date, base_price: Decimal, calendar: Calendar | None) -> Decimal:
    """Price for one day: the calendar override if set, else ``base_price``."""
    record = index_calendar(calendar).get(day)
    if record is not None:
        override = to_decimal(record.price_override)
        if override is not None:
            return override
    return base_price


def calculate_date_range_price(
    start: date,
    end: date,
    base_price: object,
    calendar: Calendar | None,
) -> Decimal:
    """Pre-fee subtotal over ``[start, end)``. Zero for an empty or inverted range."""
    base = to_decimal(base_price)
    if base is None:
        base = ZERO
    index = index_calendar(calendar)
    return sum((date_price(day, base, index) for day in iter_days(start, end)), ZERO)


def _stay_limits(
    start: date, calendar: Calendar | None, listing_limit: int | None, attr: str
) -> list[int]:
    record = index_calendar(calendar).get(start)
    limits = [listing_limit, getattr(record, attr) if record is not None else None]
    return [limit for limit in limits if limit is not None and limit > 0]


def meets_minimum_stay(
    start: date, end: date, calendar: Calendar | None, *, min_stay: int | None = None
) -> bool:
    """True if the stay is at least the listing's and the check-in day's minimum."""
    nights = (end - start).days
    return all(nights >= limit for limit in _stay_limits(start, calendar, min_stay, "minimum_stay"))


def within_maximum_stay(
    start: date, end: date, calendar: Calendar | None, *, max_stay: int | None = None
) -> bool:
    """True if the stay is at most the listing's and the check-in day's maximum."""
    nights = (end - start).days
    return all(nights <= limit for limit in _stay_limits(start, calendar, max_stay, "maximum_stay"))


def is_stay_length_allowed(
    start: date,
    end: date,
    calendar: Calendar | None,
    *,
    min_stay: int | None = None,
    max_stay: int | None = None,
) -> bool:
    """Check the stay length against listing limits and the check-in day's limits.

    The check-in day's ``minimum_stay``/``maximum_stay`` tighten the listing-wide
    ``min_stay``/``max_stay``. An empty or inverted range is never allowed.
    """
    if start >= end:
        return False
    return meets_minimum_stay(start, end, calendar, min_stay=min_stay) and within_maximum_stay(
        start, end, calendar, max_stay=max_stay
    )
