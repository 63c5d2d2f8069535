# app/services/cart_service.py
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlmodel import Session, select

from app.constants.promotions import (
    MAX_PERSONALIZATION_DIGITS,
    MAX_PERSONALIZATION_NAME,
    MAX_QTY_PER_LINE,
)
from app.models.cart import Cart, CartItem
from app.models.product import Product, ProductOptionValue
from app.schemas.promotion_schemas import CartLine
from app.services.pricing_service import compute_unit_price

logger = logging.getLogger(__name__)


class CartError(Exception):
    pass


class CartNotFound(CartError):
    pass


class ProductNotFound(CartError):
    pass


class CartItemNotFound(CartError):
    pass


def normalize_options(options: Optional[Dict[str, Optional[str]]]) -> Dict[str, str]:
    """Drop empty values and sort by key so equal choices compare equal."""
    if not options:
        return {}
    kept = [(k, str(v)) for k, v in options.items() if v is not None and v != ""]
    return dict(sorted(kept))


def get_cart(session: Session, cart_id: str) -> Cart:
    cart = session.get(Cart, cart_id)
    if not cart:
        raise CartNotFound(f"Cart {cart_id} not found")
    return cart


def get_or_create_cart(session: Session, cart_id: Optional[str] = None) -> Cart:
    if cart_id:
        cart = session.get(Cart, cart_id)
        if cart:
            return cart

    cart = Cart()
    session.add(cart)
    session.commit()
    session.refresh(cart)
    logger.info(f"Created cart {cart.id}")
    return cart


def list_items(session: Session, cart: Cart) -> List[CartItem]:
    return session.exec(
        select(CartItem)
        .where(CartItem.cart_id == cart.id)
        .order_by(CartItem.created_at, CartItem.id)
    ).all()


def _unit_price_for(session: Session, product: Product, options: Dict[str, str]) -> int:
    option_values = session.exec(
        select(ProductOptionValue).where(ProductOptionValue.product_id == product.id)
    ).all()
    return compute_unit_price(product.base_price_cents, option_values, options)


def _touch(session: Session, cart: Cart):
    cart.updated_at = datetime.now(timezone.utc)
    session.add(cart)


def sanitize_name(value) -> Optional[str]:
    """Printed name: trimmed, upper case, at most 14 characters."""
    text = "" if value is None else str(value).strip()
    return text.upper()[:MAX_PERSONALIZATION_NAME] or None


def sanitize_number(value) -> Optional[str]:
    """Printed number: digits only, at most 3. Kept as text so "07" stays "07"."""
    text = "" if value is None else str(value).strip()
    digits = "".join(ch for ch in text if ch.isascii() and ch.isdigit())
    return digits[:MAX_PERSONALIZATION_DIGITS] or None


def normalize_personalization(personalization: Optional[Dict[str, Optional[str]]]) -> Optional[Dict[str, Optional[str]]]:
    if not personalization:
        return None

    name = sanitize_name(personalization.get("name"))
    number = sanitize_number(personalization.get("number"))
    player_id = personalization.get("player_id") or None

    if not (name or number or player_id):
        return None
    return {"name": name, "number": number, "player_id": player_id}


def add_item(
    session: Session,
    cart: Cart,
    product_id: int,
    qty: int,
    options: Optional[Dict[str, Optional[str]]] = None,
    personalization: Optional[Dict[str, Optional[str]]] = None,
) -> CartItem:
    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise ProductNotFound(f"Product {product_id} not found")

    clean_options = normalize_options(options)
    clean_personalization = normalize_personalization(personalization)

    # name/number also live in the options so every view of the line shows them
    stored_options = dict(clean_options)
    if clean_personalization:
        if clean_personalization["name"]:
            stored_options["custName"] = clean_personalization["name"]
        if clean_personalization["number"]:
            stored_options["custNumber"] = clean_personalization["number"]

    try:
        # always the real catalog price, never a promotional one
        unit_price = _unit_price_for(session, product, clean_options)

        existing = next(
            (
                item for item in list_items(session, cart)
                if item.product_id == product_id
                and (item.options_json or {}) == stored_options
                and (item.personalization or None) == clean_personalization
            ),
            None,
        )

        if existing:
            existing.qty = min(MAX_QTY_PER_LINE, existing.qty + qty)
            existing.unit_price_cents = unit_price
            existing.total_price_cents = unit_price * existing.qty
            item = existing
        else:
            line_qty = min(MAX_QTY_PER_LINE, qty)
            item = CartItem(
                cart_id=cart.id,
                product_id=product_id,
                qty=line_qty,
                unit_price_cents=unit_price,
                total_price_cents=unit_price * line_qty,
                options_json=stored_options,
                personalization=clean_personalization,
            )

        session.add(item)
        _touch(session, cart)
        session.commit()
        session.refresh(item)

    except Exception as e:
        logger.error(f"Error adding product {product_id} to cart {cart.id}: {e}")
        session.rollback()
        raise

    logger.info(f"Cart {cart.id}: product {product_id} x{item.qty} {stored_options}")
    return item


def _get_item(session: Session, cart: Cart, item_id: int) -> CartItem:
    item = session.get(CartItem, item_id)
    if not item or item.cart_id != cart.id:
        raise CartItemNotFound(f"Cart item {item_id} not found")
    return item


def update_item_qty(session: Session, cart: Cart, item_id: int, qty: int) -> Optional[CartItem]:
    """Set a line's quantity. Zero or less removes the line and returns None."""
    item = _get_item(session, cart, item_id)

    if qty <= 0:
        remove_item(session, cart, item_id)
        return None

    try:
        item.qty = min(MAX_QTY_PER_LINE, qty)
        item.total_price_cents = item.unit_price_cents * item.qty
        session.add(item)
        _touch(session, cart)
        session.commit()
        session.refresh(item)

    except Exception as e:
        logger.error(f"Error updating item {item_id} in cart {cart.id}: {e}")
        session.rollback()
        raise

    return item


def remove_item(session: Session, cart: Cart, item_id: int):
    item = _get_item(session, cart, item_id)

    try:
        session.delete(item)
        _touch(session, cart)
        session.commit()

    except Exception as e:
        logger.error(f"Error removing item {item_id} from cart {cart.id}: {e}")
        session.rollback()
        raise

    logger.info(f"Cart {cart.id}: removed item {item_id}")


def clear_cart(session: Session, cart: Cart):
    try:
        items = list_items(session, cart)

        for item in items:
            session.delete(item)

        _touch(session, cart)
        session.commit()

    except Exception as e:
        logger.error(f"Error clearing cart {cart.id}: {e}")
        session.rollback()
        raise

    logger.info(f"Cart {cart.id}: cleared {len(items)} items")


def cart_lines(session: Session, cart: Cart) -> List[CartLine]:
    """Promotion engine input built from the persisted cart rows."""
    lines = []
    for item in list_items(session, cart):
        product = session.get(Product, item.product_id)
        lines.append(
            CartLine(
                id=str(item.id),
                name=product.name if product else "",
                unit_amount_cents=item.unit_price_cents,
                qty=item.qty,
                image=product.image if product else None,
            )
        )
    return lines
