from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime, timezone
from uuid import uuid4


class Cart(SQLModel, table=True):
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    items: List["CartItem"] = Relationship(back_populates="cart")


class CartItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    cart_id: str = Field(foreign_key="cart.id", index=True)
    product_id: int = Field(foreign_key="product.id")

    qty: int = 1
    unit_price_cents: int = 0
    total_price_cents: int = 0   # full price, promotions are never stored here

    options_json: dict = Field(default_factory=dict, sa_column=Column(JSON))
    personalization: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    cart: Optional[Cart] = Relationship(back_populates="items")
