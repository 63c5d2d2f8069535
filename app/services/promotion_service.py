# app/services/promotion_service.py
"""Tiered "buy more, pay less" promotion.

The free units are always the cheapest units of the whole cart, not of a
single line. Equal prices keep input order (line order, then position
inside the line), so the result is deterministic.
"""
import logging
from collections.abc import Mapping
from typing import Any, Iterable, List

from pydantic import ValidationError

from app.constants.promotions import (
    FLAT_SHIPPING_CENTS,
    FREE_ITEMS_BY_TIER,
    MAX_FREE_ITEMS_PER_ORDER,
    TIER_THRESHOLDS,
    PromotionTier,
)
from app.schemas.promotion_schemas import AppliedLine, CartLine, PromotionResult

logger = logging.getLogger(__name__)


def get_tier(total_qty: int) -> PromotionTier:
    for min_qty, tier in TIER_THRESHOLDS:
        if total_qty >= min_qty:
            return tier
    return PromotionTier.NONE


def free_count_for_tier(tier: PromotionTier) -> int:
    return FREE_ITEMS_BY_TIER.get(tier, 0)


def shipping_for(tier: PromotionTier, total_qty: int) -> int:
    # any promotion tier ships for free
    if tier != PromotionTier.NONE:
        return 0
    return FLAT_SHIPPING_CENTS if total_qty > 0 else 0


def coerce_line(raw: Any) -> CartLine:
    # instances are re-validated too: model_construct() skips validators
    if isinstance(raw, CartLine):
        raw = {name: getattr(raw, name, None) for name in CartLine.model_fields}
    if isinstance(raw, Mapping):
        try:
            return CartLine.model_validate(dict(raw))
        except ValidationError as e:
            logger.warning(f"Unreadable cart line {raw!r}: {e}")
            return CartLine()
    logger.warning(f"Unsupported cart line type {type(raw).__name__}, treated as empty")
    return CartLine()


def coerce_lines(lines: Any) -> List[CartLine]:
    if lines is None or isinstance(lines, (str, bytes, Mapping)):
        return []
    try:
        return [coerce_line(raw) for raw in lines]
    except TypeError:
        logger.warning(f"Cart lines are not iterable: {type(lines).__name__}")
        return []


def _free_units_by_line(lines: List[CartLine], free_to_apply: int) -> List[int]:
    units = []
    for index, line in enumerate(lines):
        # no line can give more than free_to_apply of the cheapest units
        expanded = min(line.qty, free_to_apply)
        units.extend((line.unit_amount_cents, index) for _ in range(expanded))

    # sort() is stable, so equal prices keep line/position order
    units.sort(key=lambda unit: unit[0])

    free_by_line = [0] * len(lines)
    for _, index in units[:free_to_apply]:
        free_by_line[index] += 1
    return free_by_line


def apply_promotions(lines: Iterable[Any]) -> PromotionResult:
    """Split every cart line into paid and free units.

    Accepts ``CartLine`` objects or plain mappings. Bad numbers are
    clamped to zero instead of raising, and an empty cart gives the
    ``NONE`` tier with no shipping.
    """
    cart = coerce_lines(lines)

    total_qty = sum(line.qty for line in cart)
    tier = get_tier(total_qty)
    shipping_cents = shipping_for(tier, total_qty)

    free_to_apply = min(free_count_for_tier(tier), MAX_FREE_ITEMS_PER_ORDER)

    if free_to_apply > 0:
        free_by_line = _free_units_by_line(cart, free_to_apply)
    else:
        free_by_line = [0] * len(cart)

    applied = []
    for line, allocated in zip(cart, free_by_line):
        free_qty = min(allocated, line.qty)
        applied.append(
            AppliedLine(
                **line.model_dump(),
                pay_qty=line.qty - free_qty,
                free_qty=free_qty,
            )
        )

    free_items_applied = sum(line.free_qty for line in applied)

    return PromotionResult(
        promo_name=tier,
        free_items_applied=free_items_applied,
        shipping_cents=shipping_cents,
        lines=applied,
    )
