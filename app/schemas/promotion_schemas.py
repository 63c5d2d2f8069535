# app/schemas/promotion_schemas.py
import math
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.constants.promotions import PromotionTier


def to_non_negative_int(value: Any) -> int:
    """Coerce prices/quantities coming from carts and request bodies.

    Negative, non-numeric and non-finite values become 0. Finite floats
    are truncated toward zero.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return max(0, value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


class CartLine(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str = ""
    name: str = ""
    # real unit price, minor units
    unit_amount_cents: int = Field(
        default=0,
        validation_alias=AliasChoices("unit_amount_cents", "unitAmountCents", "price"),
    )
    qty: int = Field(default=0, validation_alias=AliasChoices("qty", "quantity"))
    image: Optional[str] = None

    @field_validator("unit_amount_cents", "qty", mode="before")
    @classmethod
    def _clamp_numbers(cls, v):
        return to_non_negative_int(v)

    @field_validator("id", "name", mode="before")
    @classmethod
    def _as_text(cls, v):
        return "" if v is None else str(v)

    @field_validator("image", mode="before")
    @classmethod
    def _image_as_text(cls, v):
        if v is None or v == "":
            return None
        return str(v)


class AppliedLine(CartLine):
    pay_qty: int
    free_qty: int


class PromotionResult(BaseModel):
    promo_name: PromotionTier
    free_items_applied: int
    shipping_cents: int
    lines: List[AppliedLine]


class CartTotals(BaseModel):
    item_count: int
    subtotal_cents: int
    discount_cents: int
    shipping_cents: int
    total_cents: int
    promotion: PromotionResult
