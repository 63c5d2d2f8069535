from pydantic import BaseModel
from typing import List, Optional


class ProductOptionOut(BaseModel):
    group_key: str
    value: str
    price_delta_cents: int


class ProductOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    base_price_cents: int
    price_label: str
    image: Optional[str] = None
    options: List[ProductOptionOut] = []
