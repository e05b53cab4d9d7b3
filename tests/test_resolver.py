"""Unit tests for display price resolution."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from tests.factories import pricing_rule
from tripbook.pricing.resolver import (
    apply_adjustment,
    breakdown_amount,
    headline_price,
    resolve_display_price,
    select_winning_rule,
)
from tripbook.pricing.types import (
    AmountOff,
    ApplicabilityWindow,
    FixedPrice,
    PercentageOff,
    RuleKind,
    Stay,
)

TODAY = date(2026, 3, 2)  # Monday


# ---------------------------------------------------------------------------
# 1. Pass-through without rules
# ---------------------------------------------------------------------------
def test_no_rules_passes_base_price_through() -> None:
    result = resolve_display_price(100, [], False, None, on=TODAY)

    assert result.display_price == 100
    assert result.has_discount is False
    assert result.show_from_label is False
    assert result.original_price is None
    assert result.discount_percentage is None


def test_missing_rules_are_treated_as_empty() -> None:
    result = resolve_display_price(Decimal("100"), None, on=TODAY)

    assert result.display_price == 100
    assert result.has_discount is False


def test_resolution_is_idempotent() -> None:
    rules = [pricing_rule(), pricing_rule(id="rule-2", priority=3)]

    first = resolve_display_price(Decimal("100"), rules, on=TODAY)
    second = resolve_display_price(Decimal("100"), rules, on=TODAY)

    assert first == second


# ---------------------------------------------------------------------------
# 2. Adjustments
# ---------------------------------------------------------------------------
def test_percentage_discount() -> None:
    result = resolve_display_price(Decimal("100"), [pricing_rule()], on=TODAY)

    assert result.display_price == 80
    assert result.original_price == 100
    assert result.discount_percentage == 20
    assert result.has_discount is True


def test_absolute_override_derives_percentage_from_ratio() -> None:
    rule = pricing_rule(kind=RuleKind.FLAT_OVERRIDE, adjustment=FixedPrice(Decimal("75")))

    result = resolve_display_price(Decimal("100"), [rule], on=TODAY)

    assert result.display_price == 75
    assert result.discount_percentage == 25
    assert result.has_discount is True


def test_rule_that_keeps_the_price_is_not_a_discount() -> None:
    rule = pricing_rule(adjustment=FixedPrice(Decimal("100")))

    result = resolve_display_price(Decimal("100"), [rule], on=TODAY)

    assert result.display_price == 100
    assert result.has_discount is False
    assert result.original_price is None


def test_markup_is_shown_without_discount_badge() -> None:
    rule = pricing_rule(kind=RuleKind.SEASONAL, adjustment=PercentageOff(Decimal("-25")))

    result = resolve_display_price(Decimal("100"), [rule], on=TODAY)

    assert result.display_price == 125
    assert result.has_discount is False
    assert result.discount_percentage is None


def test_adjusted_price_never_goes_negative() -> None:
    assert apply_adjustment(Decimal("100"), PercentageOff(Decimal("150"))) == 0
    assert apply_adjustment(Decimal("100"), FixedPrice(Decimal("-5"))) == 0


def test_discount_percentage_rounds_half_up() -> None:
    # 100 -> 87.5 is a 12.5% discount
    rule = pricing_rule(adjustment=FixedPrice(Decimal("87.5")))

    result = resolve_display_price(Decimal("100"), [rule], on=TODAY)

    assert result.discount_percentage == 13


def test_amount_off_is_a_delta_from_the_anchor() -> None:
    rule = pricing_rule(kind=RuleKind.DISCOUNT, adjustment=AmountOff(Decimal("15")))

    result = resolve_display_price(Decimal("60"), [rule], True, Decimal("60"), on=TODAY)

    assert result.display_price == 45
    assert result.discount_percentage == 25
    assert apply_adjustment(Decimal("100"), AmountOff(Decimal("-10"))) == 110
    assert apply_adjustment(Decimal("10"), AmountOff(Decimal("25"))) == 0


def test_overflowing_adjustment_keeps_the_anchor() -> None:
    huge = Decimal("9E+999999")
    markup = pricing_rule(kind=RuleKind.SEASONAL, adjustment=PercentageOff(Decimal("-50")))

    result = resolve_display_price(huge, [markup], on=TODAY)

    assert apply_adjustment(huge, PercentageOff(Decimal("-50"))) == huge
    assert apply_adjustment(huge, AmountOff(-huge)) == huge
    assert result.display_price == huge
    assert result.has_discount is False


# ---------------------------------------------------------------------------
# 3. Winner selection
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("reverse", [False, True], ids=["low_first", "high_first"])
def test_higher_priority_wins_regardless_of_order(reverse: bool) -> None:
    low = pricing_rule(id="low", priority=5, adjustment=PercentageOff(Decimal("10")))
    high = pricing_rule(id="high", priority=10, adjustment=PercentageOff(Decimal("30")))
    rules = [high, low] if reverse else [low, high]

    result = resolve_display_price(Decimal("100"), rules, on=TODAY)

    assert result.display_price == 70
    assert select_winning_rule(rules, on=TODAY).id == "high"


def test_priority_tie_goes_to_most_recently_created() -> None:
    older = pricing_rule(
        id="older", adjustment=PercentageOff(Decimal("10")), created_at=datetime(2025, 6, 1)
    )
    newer = pricing_rule(
        id="newer", adjustment=PercentageOff(Decimal("15")), created_at=datetime(2026, 2, 1)
    )

    assert select_winning_rule([newer, older], on=TODAY).id == "newer"
    assert select_winning_rule([older, newer], on=TODAY).id == "newer"


def test_inactive_rules_are_ignored() -> None:
    rule = pricing_rule(is_active=False)

    result = resolve_display_price(Decimal("100"), [rule], on=TODAY)

    assert result.display_price == 100
    assert result.has_discount is False


def test_rule_outside_its_date_window_is_ignored() -> None:
    summer = ApplicabilityWindow(start_date=date(2026, 7, 1), end_date=date(2026, 8, 31))
    rule = pricing_rule(kind=RuleKind.SEASONAL, window=summer, priority=99)

    assert resolve_display_price(Decimal("100"), [rule], on=TODAY).has_discount is False
    assert resolve_display_price(Decimal("100"), [rule], on=date(2026, 7, 15)).has_discount


def test_window_end_date_is_inclusive() -> None:
    window = ApplicabilityWindow(start_date=date(2026, 2, 1), end_date=TODAY)

    result = resolve_display_price(Decimal("100"), [pricing_rule(window=window)], on=TODAY)

    assert result.has_discount is True


def test_day_of_week_mask_uses_sunday_as_zero() -> None:
    weekend = ApplicabilityWindow(days_of_week=frozenset({0, 6}))
    rule = pricing_rule(kind=RuleKind.WEEKEND, window=weekend)

    assert select_winning_rule([rule], on=TODAY) is None  # Monday
    assert select_winning_rule([rule], on=date(2026, 3, 1)) is not None  # Sunday
    assert select_winning_rule([rule], on=date(2026, 3, 7)) is not None  # Saturday


def test_stay_conditions_are_skipped_when_browsing() -> None:
    weekly = ApplicabilityWindow(min_nights=7)
    rule = pricing_rule(kind=RuleKind.LENGTH_OF_STAY, window=weekly)

    assert select_winning_rule([rule], on=TODAY) is not None
    short_stay = Stay(date(2026, 3, 10), date(2026, 3, 12))
    assert select_winning_rule([rule], on=TODAY, stay=short_stay) is None
    long_stay = Stay(date(2026, 3, 10), date(2026, 3, 17))
    assert select_winning_rule([rule], on=TODAY, stay=long_stay) is not None


def test_last_minute_and_early_bird_lead_times() -> None:
    last_minute = pricing_rule(
        id="last-minute",
        kind=RuleKind.LAST_MINUTE,
        window=ApplicabilityWindow(max_days_before=3),
    )
    early_bird = pricing_rule(
        id="early-bird",
        kind=RuleKind.EARLY_BIRD,
        window=ApplicabilityWindow(min_days_before=60),
    )
    soon = Stay(date(2026, 3, 4), date(2026, 3, 6))
    far = Stay(date(2026, 6, 1), date(2026, 6, 5))

    assert select_winning_rule([last_minute, early_bird], on=TODAY, stay=soon).id == "last-minute"
    assert select_winning_rule([last_minute, early_bird], on=TODAY, stay=far).id == "early-bird"


# ---------------------------------------------------------------------------
# 4. Hotel anchor
# ---------------------------------------------------------------------------
def test_hotel_with_rooms_is_anchored_to_lowest_room_price() -> None:
    result = resolve_display_price(Decimal("100"), [], True, Decimal("60"), on=TODAY)

    assert result.display_price == 60
    assert result.show_from_label is True
    assert result.has_discount is False


def test_hotel_discount_applies_to_room_anchor() -> None:
    result = resolve_display_price(Decimal("100"), [pricing_rule()], True, Decimal("60"), on=TODAY)

    assert result.display_price == 48
    assert result.original_price == 60
    assert result.show_from_label is True


def test_hotel_without_room_price_falls_back_to_base() -> None:
    result = resolve_display_price(Decimal("100"), [], True, None, on=TODAY)

    assert result.display_price == 100
    assert result.show_from_label is False


# ---------------------------------------------------------------------------
# 5. Degenerate inputs never raise
# ---------------------------------------------------------------------------
@pytest.mark.parametrize(
    "base_price", [0, -50, Decimal("0")], ids=["zero", "negative", "decimal_zero"]
)
def test_non_positive_base_price_is_passed_through(base_price: object) -> None:
    result = resolve_display_price(base_price, [pricing_rule()], on=TODAY)

    assert result.display_price == base_price
    assert result.has_discount is False
    assert result.discount_percentage is None


@pytest.mark.parametrize("base_price", [None, "abc", float("nan")], ids=["none", "text", "nan"])
def test_garbage_base_price_degrades_to_zero(base_price: object) -> None:
    result = resolve_display_price(base_price, [pricing_rule()], on=TODAY)

    assert result.display_price == 0
    assert result.has_discount is False


def test_rule_with_unusable_adjustment_is_ignored() -> None:
    broken = pricing_rule(
        id="broken", priority=10, adjustment=FixedPrice(None)  # type: ignore[arg-type]
    )

    result = resolve_display_price(Decimal("100"), [broken, pricing_rule()], on=TODAY)

    assert result.display_price == 80


# ---------------------------------------------------------------------------
# 6. Display rounding
# ---------------------------------------------------------------------------
def test_headline_price_rounds_down() -> None:
    assert headline_price(Decimal("79.99")) == 79
    assert headline_price(Decimal("80")) == 80


def test_breakdown_amount_rounds_half_up_to_cents() -> None:
    assert breakdown_amount(Decimal("12.345")) == Decimal("12.35")
    assert breakdown_amount(Decimal("80")) == Decimal("80.00")
