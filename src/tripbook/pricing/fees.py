"""Booking fee breakdown.

Service fee and taxes come from the platform's admin fee table and are looked
up by name. Only percentage fees are applied; anything else counts as zero.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from tripbook.pricing.resolver import HUNDRED, ZERO, to_decimal
from tripbook.pricing.types import AdminFee

SERVICE_FEE = "Service Fee"
TAXES = "Taxes"


@dataclass(frozen=True)
class FeeBreakdown:
    base: Decimal
    cleaning_fee: Decimal
    service_fee: Decimal
    taxes: Decimal
    insurance_fee: Decimal
    total: Decimal


def round_whole(value: Decimal) -> Decimal:
    """Round half up to a whole currency unit."""
    return value.quantize(Decimal(1), rounding=ROUND_HALF_UP)


def percentage_rate(fees: Iterable[AdminFee], name: str) -> Decimal:
    """Rate (0.1 for 10%) of the first percentage fee called ``name``, else 0."""
    fee = next((fee for fee in fees if fee.name == name), None)
    if fee is None or fee.fee_type != "percentage":
        return ZERO
    amount = to_decimal(fee.amount)
    return amount / HUNDRED if amount is not None else ZERO


def insurance_fee(base: Decimal, rate: Decimal, *, included: bool) -> Decimal:
    """Rental insurance surcharge, waived when the listing includes insurance."""
    return ZERO if included else round_whole(base * rate)


def calculate_booking_fees(
    base: Decimal,
    cleaning_fee: Decimal | None,
    fees: Iterable[AdminFee],
    *,
    insurance: Decimal = ZERO,
) -> FeeBreakdown:
    """Service fee on the base (plus insurance), taxes on everything before tax.

    Example:
        base 200, cleaning 30, Service Fee 10%, Taxes 5%
        service = 20, taxes = round(250 * 0.05) = 13, total = 263
    """
    fee_list = list(fees)
    cleaning = cleaning_fee or ZERO
    taxable_base = base + insurance

    service = round_whole(taxable_base * percentage_rate(fee_list, SERVICE_FEE))
    taxes = round_whole((taxable_base + service + cleaning) * percentage_rate(fee_list, TAXES))

    return FeeBreakdown(
        base=base,
        cleaning_fee=cleaning,
        service_fee=service,
        taxes=taxes,
        insurance_fee=insurance,
        total=taxable_base + cleaning + service + taxes,
    )
