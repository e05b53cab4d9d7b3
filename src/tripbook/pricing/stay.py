"""Per-night pricing for a concrete stay or rental.

Each night starts from the calendar override (or the listing's base price),
then the rule that wins for that night is applied on top of it.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from tripbook.pricing.availability import Calendar, date_price, index_calendar, iter_days
from tripbook.pricing.resolver import (
    ZERO,
    apply_adjustment,
    discount_percentage,
    select_winning_rule,
    to_decimal,
)
from tripbook.pricing.types import PricingRule, Stay


@dataclass(frozen=True)
class NightPrice:
    date: date
    base: Decimal
    price: Decimal
    rule_id: str | None = None


@dataclass(frozen=True)
class StayPrice:
    """Pre-fee pricing for a stay.

    ``original_subtotal`` is the undiscounted ``base_price * nights``, the
    reference the discount badge is computed against.
    """

    nights: int
    subtotal: Decimal
    original_subtotal: Decimal
    discount_amount: Decimal
    discount_percentage: int
    has_discount: bool
    average_nightly_price: Decimal
    breakdown: tuple[NightPrice, ...] = ()


def price_stay(
    stay: Stay,
    base_price: object,
    rules: Iterable[PricingRule] | None,
    calendar: Calendar | None,
    *,
    on: date,
) -> StayPrice:
    base = to_decimal(base_price)
    if base is None:
        base = ZERO
    if not stay.is_valid:
        return StayPrice(
            nights=0,
            subtotal=ZERO,
            original_subtotal=ZERO,
            discount_amount=ZERO,
            discount_percentage=0,
            has_discount=False,
            average_nightly_price=base,
        )

    index = index_calendar(calendar)
    rule_list = list(rules or ())
    nights: list[NightPrice] = []
    for day in iter_days(stay.check_in, stay.check_out):
        nightly = date_price(day, base, index)
        winner = select_winning_rule(rule_list, on=on, stay=stay, day=day)
        if winner is None:
            nights.append(NightPrice(date=day, base=nightly, price=nightly))
        else:
            price = apply_adjustment(nightly, winner.adjustment)
            nights.append(NightPrice(date=day, base=nightly, price=price, rule_id=winner.id))

    subtotal = sum((night.price for night in nights), ZERO)
    original_subtotal = base * len(nights)
    discount_amount = max(ZERO, original_subtotal - subtotal)
    return StayPrice(
        nights=len(nights),
        subtotal=subtotal,
        original_subtotal=original_subtotal,
        discount_amount=discount_amount,
        discount_percentage=discount_percentage(original_subtotal, subtotal)
        if discount_amount > 0
        else 0,
        has_discount=discount_amount > 0,
        average_nightly_price=subtotal / len(nights),
        breakdown=tuple(nights),
    )
