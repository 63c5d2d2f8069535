from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from app.constants.promotions import MAX_QTY_PER_LINE
from app.schemas.promotion_schemas import CartTotals


class Personalization(BaseModel):
    # cleaned up by the cart service (upper case name, digits-only number)
    name: Optional[str] = Field(default=None, max_length=40)
    number: Optional[str] = Field(default=None, max_length=10)
    player_id: Optional[str] = None


class CartAddRequest(BaseModel):
    product_id: int
    qty: int = Field(default=1, ge=1, le=MAX_QTY_PER_LINE)
    options: Dict[str, Optional[str]] = Field(default_factory=dict)
    personalization: Optional[Personalization] = None


class CartUpdateRequest(BaseModel):
    qty: int


class CartItemOut(BaseModel):
    item_id: int
    product_id: int
    name: str
    image: Optional[str] = None
    options: Dict[str, str]
    personalization: Optional[Dict[str, Optional[str]]] = None
    qty: int
    pay_qty: int
    free_qty: int
    unit_price_cents: int
    line_total_cents: int       # pay_qty * unit price


class CartSummary(BaseModel):
    cart_id: str
    items: List[CartItemOut]
    totals: CartTotals
    total_label: str
