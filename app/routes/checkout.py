import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.config import settings
from app.database import get_session
from app.models.cart import Cart
from app.routes.cart import load_cart
from app.schemas.checkout_schemas import CheckoutQuote
from app.services import cart_service
from app.services.pricing_service import (
    build_payment_line_items,
    build_payment_metadata,
    build_shipping_option,
    calculate_cart_totals,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{cart_id}/quote", response_model=CheckoutQuote)
def checkout_quote(cart: Cart = Depends(load_cart), session: Session = Depends(get_session)):
    """Everything the payment step needs, priced on the server."""
    lines = cart_service.cart_lines(session, cart)
    if not lines:
        raise HTTPException(400, "Cart is empty")

    totals = calculate_cart_totals(lines)
    promo = totals.promotion

    logger.info(
        f"Quote for cart {cart.id}: {promo.promo_name.value}, "
        f"{promo.free_items_applied} free, total {totals.total_cents}"
    )

    return CheckoutQuote(
        cart_id=cart.id,
        currency=settings.currency,
        totals=totals,
        line_items=build_payment_line_items(promo, settings.currency),
        shipping_option=build_shipping_option(promo, settings.currency),
        metadata=build_payment_metadata(promo, cart.id),
    )
