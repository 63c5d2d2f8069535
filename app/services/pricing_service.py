# app/services/pricing_service.py
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.schemas.promotion_schemas import CartTotals, PromotionResult, to_non_negative_int
from app.services.promotion_service import apply_promotions

logger = logging.getLogger(__name__)


def calculate_cart_totals(lines: Iterable[Any]) -> CartTotals:
    """Subtotal at full price, minus the free units, plus shipping."""
    promo = apply_promotions(lines)

    item_count = sum(line.qty for line in promo.lines)
    subtotal = sum(line.unit_amount_cents * line.qty for line in promo.lines)
    discount = sum(line.unit_amount_cents * line.free_qty for line in promo.lines)

    total = subtotal - discount + promo.shipping_cents

    return CartTotals(
        item_count=item_count,
        subtotal_cents=subtotal,
        discount_cents=discount,
        shipping_cents=promo.shipping_cents,
        total_cents=total,
        promotion=promo,
    )


def compute_unit_price(
    base_price_cents: int,
    option_values: Iterable[Any],
    chosen_options: Optional[Mapping[str, Optional[str]]] = None,
) -> int:
    """Base price plus the delta of every chosen option value.

    ``option_values`` are rows with ``group_key``, ``value`` and
    ``price_delta_cents``. Unknown groups or values add nothing.
    """
    price = to_non_negative_int(base_price_cents)
    if not chosen_options:
        return price

    for option in option_values:
        chosen = chosen_options.get(option.group_key)
        if chosen and chosen == option.value:
            price += int(option.price_delta_cents or 0)

    return max(0, price)


def build_payment_line_items(result: PromotionResult, currency: str = "eur") -> List[Dict[str, Any]]:
    # free units go out as a separate 0-amount entry so receipts show them
    items = []
    for line in result.lines:
        product_data: Dict[str, Any] = {"name": line.name}
        if line.image:
            product_data["images"] = [line.image]

        if line.pay_qty > 0:
            items.append({
                "quantity": line.pay_qty,
                "price_data": {
                    "currency": currency,
                    "unit_amount": line.unit_amount_cents,
                    "product_data": product_data,
                },
            })

        if line.free_qty > 0:
            items.append({
                "quantity": line.free_qty,
                "price_data": {
                    "currency": currency,
                    "unit_amount": 0,
                    "product_data": {**product_data, "name": f"{line.name} (FREE)"},
                },
            })

    return items


def build_shipping_option(result: PromotionResult, currency: str = "eur") -> Dict[str, Any]:
    return {
        "shipping_rate_data": {
            "type": "fixed_amount",
            "fixed_amount": {"currency": currency, "amount": result.shipping_cents},
            "display_name": "Free Shipping" if result.shipping_cents == 0 else "Shipping",
        }
    }


def build_payment_metadata(result: PromotionResult, cart_id: str) -> Dict[str, str]:
    return {
        "cart_id": str(cart_id),
        "promo_name": result.promo_name.value,
        "free_items_applied": str(result.free_items_applied),
        "shipping_cents": str(result.shipping_cents),
    }
