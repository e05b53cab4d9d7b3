"""Unit tests for calendar availability and date-range pricing."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from tests.factories import calendar
from tripbook.pricing.availability import (
    calculate_date_range_price,
    is_date_available,
    is_date_range_available,
    is_stay_length_allowed,
    meets_minimum_stay,
    within_maximum_stay,
)
from tripbook.pricing.types import AvailabilityRecord

MARCH_1 = date(2026, 3, 1)
MARCH_31 = date(2026, 3, 31)


# ---------------------------------------------------------------------------
# 1. Single days (fail-closed)
# ---------------------------------------------------------------------------
def test_missing_record_is_unavailable() -> None:
    """Regression: an unknown day must never be treated as bookable."""
    records = calendar(date(2026, 3, 10), date(2026, 3, 12))

    assert is_date_available(date(2026, 3, 9), records) is False
    assert is_date_available(date(2026, 3, 12), records) is False


def test_empty_calendar_makes_every_day_unavailable() -> None:
    day = MARCH_1
    while day <= MARCH_31:
        assert is_date_available(day, []) is False
        assert is_date_available(day, None) is False
        day += timedelta(days=1)


def test_every_day_outside_the_calendar_is_unavailable() -> None:
    records = calendar(date(2026, 3, 10), date(2026, 3, 20))
    covered = {record.date for record in records}

    day = date(2026, 1, 1)
    while day < date(2026, 6, 1):
        if day not in covered:
            assert is_date_available(day, records) is False
        day += timedelta(days=1)


def test_record_flag_is_returned_verbatim() -> None:
    records = calendar(date(2026, 3, 10), date(2026, 3, 12), unavailable=(date(2026, 3, 11),))

    assert is_date_available(date(2026, 3, 10), records) is True
    assert is_date_available(date(2026, 3, 11), records) is False


def test_later_record_for_same_day_wins() -> None:
    day = date(2026, 3, 10)
    records = [
        AvailabilityRecord(date=day, is_available=True),
        AvailabilityRecord(date=day, is_available=False),
    ]

    assert is_date_available(day, records) is False


# ---------------------------------------------------------------------------
# 2. Ranges
# ---------------------------------------------------------------------------
def test_range_is_available_when_every_night_is() -> None:
    records = calendar(date(2026, 3, 10), date(2026, 3, 13))

    assert is_date_range_available(date(2026, 3, 10), date(2026, 3, 13), records) is True


def test_checkout_day_does_not_need_a_record() -> None:
    records = calendar(date(2026, 3, 10), date(2026, 3, 13))

    # 03-13 is the checkout day and has no record
    assert is_date_range_available(date(2026, 3, 11), date(2026, 3, 13), records) is True


def test_single_day_rental_only_needs_start_day() -> None:
    records = [AvailabilityRecord(date=date(2026, 3, 10), is_available=True)]

    assert is_date_range_available(date(2026, 3, 10), date(2026, 3, 11), records) is True


@pytest.mark.parametrize(
    "blocked",
    [date(2026, 3, 10), date(2026, 3, 14), date(2026, 3, 19)],
    ids=["first_night", "middle_night", "last_night"],
)
def test_one_blocked_night_fails_the_whole_range(blocked: date) -> None:
    records = calendar(date(2026, 3, 10), date(2026, 3, 20), unavailable=(blocked,))

    assert is_date_range_available(date(2026, 3, 10), date(2026, 3, 20), records) is False


def test_gap_in_calendar_fails_the_range() -> None:
    records = calendar(date(2026, 3, 10), date(2026, 3, 12)) + calendar(
        date(2026, 3, 13), date(2026, 3, 15)
    )

    assert is_date_range_available(date(2026, 3, 10), date(2026, 3, 15), records) is False


def test_zero_length_range_is_unavailable() -> None:
    records = calendar(date(2026, 3, 10), date(2026, 3, 15))

    assert is_date_range_available(date(2026, 3, 12), date(2026, 3, 12), records) is False


def test_inverted_range_is_unavailable_and_free() -> None:
    start, end = date(2026, 3, 10), date(2026, 3, 13)
    records = calendar(start, end)

    assert is_date_range_available(end, start, records) is False
    assert calculate_date_range_price(end, start, Decimal("40"), records) == 0


# ---------------------------------------------------------------------------
# 3. Range pricing
# ---------------------------------------------------------------------------
def test_range_price_uses_overrides_and_base_price() -> None:
    records = calendar(
        date(2026, 3, 10), date(2026, 3, 13), overrides={date(2026, 3, 11): Decimal("50")}
    )

    total = calculate_date_range_price(date(2026, 3, 10), date(2026, 3, 13), Decimal("40"), records)

    assert total == Decimal("130")


def test_range_price_falls_back_to_base_for_days_without_records() -> None:
    total = calculate_date_range_price(date(2026, 3, 10), date(2026, 3, 15), Decimal("40"), [])

    assert total == Decimal("200")


def test_range_price_excludes_checkout_day() -> None:
    records = calendar(
        date(2026, 3, 10), date(2026, 3, 12), overrides={date(2026, 3, 11): Decimal("999")}
    )

    total = calculate_date_range_price(date(2026, 3, 10), date(2026, 3, 11), Decimal("40"), records)

    assert total == Decimal("40")


# ---------------------------------------------------------------------------
# 4. Stay length limits
# ---------------------------------------------------------------------------
def test_listing_minimum_and_maximum_stay() -> None:
    start = date(2026, 3, 10)

    assert meets_minimum_stay(start, date(2026, 3, 11), [], min_stay=2) is False
    assert meets_minimum_stay(start, date(2026, 3, 12), [], min_stay=2) is True
    assert within_maximum_stay(start, date(2026, 3, 25), [], max_stay=14) is False
    assert within_maximum_stay(start, date(2026, 3, 24), [], max_stay=14) is True


def test_check_in_day_limits_tighten_listing_limits() -> None:
    start = date(2026, 3, 10)
    records = [AvailabilityRecord(date=start, is_available=True, minimum_stay=3, maximum_stay=5)]

    assert is_stay_length_allowed(start, date(2026, 3, 12), records, min_stay=2) is False
    assert is_stay_length_allowed(start, date(2026, 3, 13), records, min_stay=2) is True
    assert is_stay_length_allowed(start, date(2026, 3, 16), records, max_stay=14) is False


def test_stay_length_rejects_inverted_range() -> None:
    assert is_stay_length_allowed(date(2026, 3, 12), date(2026, 3, 10), []) is False
