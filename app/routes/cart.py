from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.config import settings
from app.database import get_session
from app.models.cart import Cart
from app.schemas.cart_schemas import CartAddRequest, CartItemOut, CartSummary, CartUpdateRequest
from app.services import cart_service
from app.services.cart_service import CartItemNotFound, CartNotFound, ProductNotFound
from app.services.pricing_service import calculate_cart_totals
from app.utils.money import format_money

router = APIRouter()


def load_cart(cart_id: str, session: Session = Depends(get_session)) -> Cart:
    try:
        return cart_service.get_cart(session, cart_id)
    except CartNotFound:
        raise HTTPException(status_code=404, detail="Cart not found")


def build_cart_summary(session: Session, cart: Cart) -> CartSummary:
    items = cart_service.list_items(session, cart)
    lines = cart_service.cart_lines(session, cart)
    totals = calculate_cart_totals(lines)

    # engine output keeps input order, so it zips back onto the rows
    items_out = []
    for item, applied in zip(items, totals.promotion.lines):
        items_out.append(
            CartItemOut(
                item_id=item.id,
                product_id=item.product_id,
                name=applied.name,
                image=applied.image,
                options=item.options_json or {},
                personalization=item.personalization,
                qty=applied.qty,
                pay_qty=applied.pay_qty,
                free_qty=applied.free_qty,
                unit_price_cents=applied.unit_amount_cents,
                line_total_cents=applied.unit_amount_cents * applied.pay_qty,
            )
        )

    return CartSummary(
        cart_id=cart.id,
        items=items_out,
        totals=totals,
        total_label=format_money(totals.total_cents, settings.currency),
    )


# Create Cart

@router.post("/", status_code=201)
def create_cart(session: Session = Depends(get_session)):
    cart = cart_service.get_or_create_cart(session)
    return {"cart_id": cart.id}


# View Cart

@router.get("/{cart_id}", response_model=CartSummary)
def get_cart(cart: Cart = Depends(load_cart), session: Session = Depends(get_session)):
    return build_cart_summary(session, cart)


# Add to Cart

@router.post("/{cart_id}/add", response_model=CartSummary)
def add_to_cart(
    data: CartAddRequest,
    cart: Cart = Depends(load_cart),
    session: Session = Depends(get_session),
):
    try:
        cart_service.add_item(
            session,
            cart,
            data.product_id,
            data.qty,
            data.options,
            data.personalization.model_dump() if data.personalization else None,
        )
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")

    return build_cart_summary(session, cart)


# Update Cart

@router.put("/{cart_id}/items/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    cart: Cart = Depends(load_cart),
    session: Session = Depends(get_session),
):
    try:
        cart_service.update_item_qty(session, cart, item_id, data.qty)
    except CartItemNotFound:
        raise HTTPException(404, "Cart item not found")

    return build_cart_summary(session, cart)


# Remove from Cart

@router.delete("/{cart_id}/items/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: int,
    cart: Cart = Depends(load_cart),
    session: Session = Depends(get_session),
):
    try:
        cart_service.remove_item(session, cart, item_id)
    except CartItemNotFound:
        raise HTTPException(404, "Cart item not found")

    return build_cart_summary(session, cart)


# Clear Cart

@router.delete("/{cart_id}/clear")
def clear_cart(cart: Cart = Depends(load_cart), session: Session = Depends(get_session)):
    cart_service.clear_cart(session, cart)
    return {"message": "Cart cleared"}
