from fastapi import APIRouter

from app.schemas.checkout_schemas import QuoteRequest
from app.schemas.promotion_schemas import CartTotals
from app.services.pricing_service import calculate_cart_totals

router = APIRouter()


# Stateless price check, used by the cart UI before a cart exists
@router.post("/quote", response_model=CartTotals)
def quote(data: QuoteRequest):
    return calculate_cart_totals(data.lines)
