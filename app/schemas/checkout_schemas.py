# app/schemas/checkout_schemas.py
from pydantic import BaseModel
from typing import Any, Dict, List

from app.schemas.promotion_schemas import CartLine, CartTotals


class QuoteRequest(BaseModel):
    lines: List[CartLine] = []


class CheckoutQuote(BaseModel):
    cart_id: str
    currency: str
    totals: CartTotals
    line_items: List[Dict[str, Any]]     # payment-processor shaped, free units at 0
    shipping_option: Dict[str, Any]
    metadata: Dict[str, str]
