from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List
from datetime import datetime, timezone


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    description: Optional[str] = None

    # prices are always integer cents
    base_price_cents: int = Field(default=0, ge=0)
    image: Optional[str] = None
    is_active: bool = True

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    options: List["ProductOptionValue"] = Relationship(back_populates="product")


class ProductOptionValue(SQLModel, table=True):
    __tablename__ = "product_option_value"

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="product.id", index=True)

    group_key: str          # e.g. "size", "patch"
    value: str              # e.g. "XL", "champions"
    price_delta_cents: int = 0

    product: Optional[Product] = Relationship(back_populates="options")
