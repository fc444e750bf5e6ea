# boutique/schemas/cart.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import field_validator
from sqlmodel import SQLModel, Field

from boutique.schemas.pricing import Money


class LineItem(SQLModel):
    """
    One product/quantity pairing as seen by the pricing engine.
    """

    id: str
    title: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    variant: str = ""


class Cart(SQLModel):
    """
    A shopper's cart, passed explicitly into pricing calls.

    At most one item per (id, variant).
    """

    items: list[LineItem] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)
    variant: str = Field(default="", max_length=100)

    @field_validator("variant")
    @classmethod
    def normalize_variant(cls, v: str) -> str:
        return v.strip()


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item. 0 removes the item.
    """

    quantity: int = Field(ge=0)


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, including line_total.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    product_title: str
    variant: str
    quantity: int
    snapshot_price: Money
    line_total: Money
    created_at: datetime


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    subtotal: Money
