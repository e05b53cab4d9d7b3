"""Pricing rule and room price queries.

Read-only query functions returning domain objects. Rows are converted to
``tripbook.pricing.types`` here so nothing above this layer touches the ORM
shape of a rule.
"""

import uuid
from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripbook.logging import get_logger
from tripbook.models import Room, SupplierPricingRule
from tripbook.pricing.resolver import to_decimal
from tripbook.pricing.types import (
    Adjustment,
    AmountOff,
    ApplicabilityWindow,
    FixedPrice,
    PercentageOff,
    PricingRule,
    RoomPriceInfo,
    RuleKind,
)

logger = get_logger(__name__)


def _adjustment(row: SupplierPricingRule) -> Adjustment | None:
    # Stored values are signed: negative makes the listing cheaper. Discount
    # rows are always reductions, whatever sign the supplier typed.
    value = to_decimal(row.adjustment_value)
    if value is None:
        return None
    if row.rule_type == RuleKind.DISCOUNT:
        value = -abs(value)

    match row.adjustment_type:
        case "percentage":
            return PercentageOff(percent=-value)
        case "fixed" if row.rule_type == RuleKind.FLAT_OVERRIDE:
            return FixedPrice(amount=value)
        case "fixed":
            return AmountOff(amount=-value)
    return None


def _days_of_week(row: SupplierPricingRule) -> frozenset[int] | None:
    try:
        return frozenset(int(day) for day in row.days_of_week or ())
    except (TypeError, ValueError):
        return None


def to_pricing_rule(row: SupplierPricingRule) -> PricingRule | None:
    """Convert a row to a domain rule, or None if the row cannot be understood.

    Unknown rule or adjustment types and malformed day masks are logged and
    skipped.
    """
    if row.rule_type not in RuleKind:
        logger.warning("pricing_rule_skipped", rule_id=str(row.id), rule_type=row.rule_type)
        return None

    adjustment = _adjustment(row)
    if adjustment is None:
        logger.warning(
            "pricing_rule_skipped",
            rule_id=str(row.id),
            adjustment_type=row.adjustment_type,
            adjustment_value=str(row.adjustment_value),
        )
        return None

    days_of_week = _days_of_week(row)
    if days_of_week is None:
        logger.warning(
            "pricing_rule_skipped", rule_id=str(row.id), days_of_week=repr(row.days_of_week)
        )
        return None

    return PricingRule(
        id=str(row.id),
        kind=RuleKind(row.rule_type),
        adjustment=adjustment,
        priority=row.priority,
        is_active=row.is_active,
        window=ApplicabilityWindow(
            start_date=row.start_date,
            end_date=row.end_date,
            days_of_week=days_of_week,
            min_nights=row.min_nights,
            max_nights=row.max_nights,
            min_days_before=row.min_days_before,
            max_days_before=row.max_days_before,
        ),
        created_at=row.created_at,
    )


def _to_rules(rows: Sequence[SupplierPricingRule]) -> list[PricingRule]:
    return [rule for rule in map(to_pricing_rule, rows) if rule is not None]


async def list_pricing_rules(
    db: AsyncSession,
    *,
    accommodation_id: uuid.UUID | None = None,
    vehicle_id: uuid.UUID | None = None,
) -> list[PricingRule]:
    """Active listing-level rules for one accommodation or vehicle, highest priority first.

    Room-specific rules are excluded; they do not affect the listing price.
    """
    stmt = (
        select(SupplierPricingRule)
        .where(SupplierPricingRule.is_active.is_(True))
        .order_by(SupplierPricingRule.priority.desc())
    )
    if accommodation_id is not None:
        stmt = stmt.where(
            SupplierPricingRule.accommodation_id == accommodation_id,
            SupplierPricingRule.room_id.is_(None),
        )
    elif vehicle_id is not None:
        stmt = stmt.where(SupplierPricingRule.vehicle_id == vehicle_id)
    else:
        return []

    result = await db.execute(stmt)
    return _to_rules(result.scalars().all())


async def list_room_pricing_rules(
    db: AsyncSession, accommodation_id: uuid.UUID, room_id: uuid.UUID
) -> list[PricingRule]:
    """Active rules for one room: its own rules plus the hotel's listing-level rules."""
    stmt = (
        select(SupplierPricingRule)
        .where(
            SupplierPricingRule.is_active.is_(True),
            or_(
                SupplierPricingRule.room_id == room_id,
                and_(
                    SupplierPricingRule.accommodation_id == accommodation_id,
                    SupplierPricingRule.room_id.is_(None),
                ),
            ),
        )
        .order_by(SupplierPricingRule.priority.desc())
    )
    result = await db.execute(stmt)
    return _to_rules(result.scalars().all())


async def list_pricing_rules_by_accommodation(
    db: AsyncSession, accommodation_ids: list[uuid.UUID]
) -> dict[uuid.UUID, list[PricingRule]]:
    """Active listing-level rules for several accommodations in one query."""
    if not accommodation_ids:
        return {}
    stmt = select(SupplierPricingRule).where(
        SupplierPricingRule.is_active.is_(True),
        SupplierPricingRule.accommodation_id.in_(accommodation_ids),
        SupplierPricingRule.room_id.is_(None),
    )
    result = await db.execute(stmt)

    grouped: dict[uuid.UUID, list[PricingRule]] = defaultdict(list)
    for row in result.scalars().all():
        rule = to_pricing_rule(row)
        if rule is not None and row.accommodation_id is not None:
            grouped[row.accommodation_id].append(rule)
    return dict(grouped)


async def get_lowest_room_prices(
    db: AsyncSession, accommodation_ids: list[uuid.UUID]
) -> dict[uuid.UUID, RoomPriceInfo]:
    """Lowest active room price per accommodation. Accommodations without rooms are absent."""
    if not accommodation_ids:
        return {}
    stmt = (
        select(Room.accommodation_id, func.min(Room.price_per_night))
        .where(Room.accommodation_id.in_(accommodation_ids), Room.is_active.is_(True))
        .group_by(Room.accommodation_id)
    )
    result = await db.execute(stmt)
    return {
        row[0]: RoomPriceInfo(has_rooms=True, lowest_price=row[1]) for row in result.all()
    }


async def get_room_price_info(db: AsyncSession, accommodation_id: uuid.UUID) -> RoomPriceInfo:
    """Lowest active room price for one accommodation."""
    prices = await get_lowest_room_prices(db, [accommodation_id])
    return prices.get(accommodation_id, RoomPriceInfo(has_rooms=False, lowest_price=None))
