"""Domain types for pricing and availability.

Plain frozen dataclasses with no ORM or Pydantic dependency, so the pure
core can be called from services, tests, or a REPL alike. Money is always
``Decimal``; calendar keys are ``datetime.date`` (day granularity, no
timezone).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum


class RuleKind(StrEnum):
    """What a pricing rule is for. Matching uses the window, not the kind."""

    DISCOUNT = "discount"
    SEASONAL = "seasonal"
    LAST_MINUTE = "last_minute"
    EARLY_BIRD = "early_bird"
    WEEKEND = "weekend"
    LENGTH_OF_STAY = "length_of_stay"
    FLAT_OVERRIDE = "flat_override"
    PERCENTAGE_DISCOUNT = "percentage_discount"


@dataclass(frozen=True)
class PercentageOff:
    """Take ``percent`` off the anchor price. Negative values are markups."""

    percent: Decimal


@dataclass(frozen=True)
class FixedPrice:
    """Replace the anchor price with ``amount`` (an override, not a delta)."""

    amount: Decimal


@dataclass(frozen=True)
class AmountOff:
    """Take ``amount`` off the anchor price. Negative values are surcharges."""

    amount: Decimal


type Adjustment = PercentageOff | AmountOff | FixedPrice


@dataclass(frozen=True)
class Stay:
    """A concrete stay or rental: ``check_in`` inclusive, ``check_out`` exclusive."""

    check_in: date
    check_out: date

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_valid(self) -> bool:
        return self.check_in < self.check_out


@dataclass(frozen=True)
class ApplicabilityWindow:
    """Conditions under which a rule applies. Every condition set must hold.

    ``days_of_week`` uses 0=Sunday .. 6=Saturday. Stay-length and lead-time
    conditions (``min_nights``, ``max_nights``, ``min_days_before``,
    ``max_days_before``) need concrete stay dates and are skipped when the
    rule is evaluated at browse time.
    """

    start_date: date | None = None
    end_date: date | None = None
    days_of_week: frozenset[int] = frozenset()
    min_nights: int | None = None
    max_nights: int | None = None
    min_days_before: int | None = None
    max_days_before: int | None = None

    def covers(self, day: date, *, today: date, stay: Stay | None = None) -> bool:
        """Return True if this window includes ``day``.

        ``today`` anchors lead-time conditions; ``stay`` (when known) supplies
        the check-in date and stay length.
        """
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        if self.days_of_week and sunday_based_weekday(day) not in self.days_of_week:
            return False

        if stay is None:
            return True

        nights = stay.nights
        if self.min_nights is not None and nights < self.min_nights:
            return False
        if self.max_nights is not None and nights > self.max_nights:
            return False

        lead_days = (stay.check_in - today).days
        if self.min_days_before is not None and lead_days < self.min_days_before:
            return False
        if self.max_days_before is not None and lead_days > self.max_days_before:
            return False
        return True


@dataclass(frozen=True)
class PricingRule:
    """A listing-scoped price adjustment."""

    id: str
    kind: RuleKind
    adjustment: Adjustment
    priority: int = 0
    is_active: bool = True
    window: ApplicabilityWindow = field(default_factory=ApplicabilityWindow)
    created_at: datetime | None = None


@dataclass(frozen=True)
class RoomPriceInfo:
    """Lowest active room price for a hotel-type listing."""

    has_rooms: bool
    lowest_price: Decimal | None


@dataclass(frozen=True)
class DisplayPrice:
    """Resolved price for a listing card or booking bar.

    ``original_price`` and ``discount_percentage`` are only set when
    ``has_discount`` is True.
    """

    display_price: Decimal
    has_discount: bool
    show_from_label: bool
    original_price: Decimal | None = None
    discount_percentage: int | None = None


@dataclass(frozen=True)
class AvailabilityRecord:
    """One calendar day for a listing. Absence of a record means unavailable."""

    date: date
    is_available: bool
    price_override: Decimal | None = None
    minimum_stay: int | None = None
    maximum_stay: int | None = None


@dataclass(frozen=True)
class AdminFee:
    """Platform fee applied on top of the stay subtotal."""

    name: str
    fee_type: str  # "percentage" | "fixed"
    amount: Decimal


def sunday_based_weekday(day: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday, as stored in ``days_of_week``."""
    return day.isoweekday() % 7
