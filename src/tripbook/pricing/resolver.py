"""Display price resolution.

Given a listing's base price, its pricing rules and (for hotel-type listings)
the lowest active room price, work out what a card or booking bar shows:
the price, whether it is discounted, by how much, and whether to prefix it
with "from".

Everything here is pure and never raises. Malformed inputs degrade to
"no discount, show the anchor price".
"""

import math
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

from tripbook.pricing.types import (
    Adjustment,
    AmountOff,
    DisplayPrice,
    FixedPrice,
    PercentageOff,
    PricingRule,
    Stay,
)

ZERO = Decimal(0)
HUNDRED = Decimal(100)
CENT = Decimal("0.01")


def to_decimal(value: object) -> Decimal | None:
    """Coerce a numeric input to a finite ``Decimal``, or None if that is not possible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return result if result.is_finite() else None


def apply_adjustment(price: Decimal, adjustment: Adjustment) -> Decimal:
    """Apply a rule adjustment to ``price``. The result never goes below zero.

    Arithmetic that overflows the decimal context leaves ``price`` unchanged.
    """
    try:
        match adjustment:
            case PercentageOff(percent=percent):
                adjusted = price * (1 - (to_decimal(percent) or ZERO) / HUNDRED)
            case AmountOff(amount=amount):
                adjusted = price - (to_decimal(amount) or ZERO)
            case FixedPrice(amount=amount):
                override = to_decimal(amount)
                adjusted = price if override is None else override
            case _:
                adjusted = price
    except ArithmeticError:
        adjusted = price
    return max(ZERO, adjusted)


def discount_percentage(anchor: Decimal, discounted: Decimal) -> int:
    """Whole-number discount derived from the actual price ratio.

    Rounds half up. Returns 0 for a non-positive anchor.
    """
    if anchor <= 0:
        return 0
    ratio = (1 - discounted / anchor) * HUNDRED
    return min(100, max(0, int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))))


def _has_usable_adjustment(rule: PricingRule) -> bool:
    match rule.adjustment:
        case PercentageOff(percent=value) | AmountOff(amount=value) | FixedPrice(amount=value):
            return to_decimal(value) is not None
    return False


def _precedence(rule: PricingRule) -> tuple[int, float, str]:
    # Highest priority, then most recently created, then id for a total order.
    created = rule.created_at.timestamp() if rule.created_at is not None else -math.inf
    return (rule.priority, created, str(rule.id))


def applicable_rules(
    rules: Iterable[PricingRule] | None,
    *,
    on: date,
    stay: Stay | None = None,
    day: date | None = None,
) -> list[PricingRule]:
    """Active rules whose window covers the evaluated day.

    The evaluated day is ``day`` if given, else the stay's check-in, else ``on``.
    """
    if day is None:
        day = stay.check_in if stay is not None else on
    return [
        rule
        for rule in rules or ()
        if rule.is_active
        and _has_usable_adjustment(rule)
        and rule.window.covers(day, today=on, stay=stay)
    ]


def select_winning_rule(
    rules: Iterable[PricingRule] | None,
    *,
    on: date,
    stay: Stay | None = None,
    day: date | None = None,
) -> PricingRule | None:
    """Pick the single rule that decides the price, or None if nothing applies."""
    candidates = applicable_rules(rules, on=on, stay=stay, day=day)
    if not candidates:
        return None
    return max(candidates, key=_precedence)


def resolve_display_price(
    base_price: object,
    rules: Iterable[PricingRule] | None = None,
    has_rooms: bool = False,
    lowest_room_price: object = None,
    *,
    on: date | None = None,
    stay: Stay | None = None,
) -> DisplayPrice:
    """Resolve the price to show for a listing.

    Hotel-type listings with rooms are anchored to their lowest room price and
    get a "from" label. The winning rule (see ``select_winning_rule``) is
    applied to the anchor; ``on`` defaults to today and is the day evaluated
    at browse time, while ``stay`` switches to booking-context evaluation.

    The returned price is unrounded; use ``headline_price`` or
    ``breakdown_amount`` for display.
    """
    room_price = to_decimal(lowest_room_price) if has_rooms else None
    show_from_label = room_price is not None
    anchor = room_price if room_price is not None else to_decimal(base_price)
    if anchor is None:
        anchor = ZERO

    undiscounted = DisplayPrice(
        display_price=anchor, has_discount=False, show_from_label=show_from_label
    )
    if anchor <= 0:
        return undiscounted

    winner = select_winning_rule(rules, on=on or date.today(), stay=stay)
    if winner is None:
        return undiscounted

    discounted = apply_adjustment(anchor, winner.adjustment)
    if discounted >= anchor:
        return DisplayPrice(
            display_price=discounted, has_discount=False, show_from_label=show_from_label
        )

    return DisplayPrice(
        display_price=discounted,
        has_discount=True,
        show_from_label=show_from_label,
        original_price=anchor,
        discount_percentage=discount_percentage(anchor, discounted),
    )


def headline_price(value: Decimal) -> int:
    """Whole currency units, rounded down, for cards and the booking bar."""
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def breakdown_amount(value: Decimal) -> Decimal:
    """Two-decimal amount, rounded half up, for fee breakdowns."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
