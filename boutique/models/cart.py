# boutique/models/cart.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Shopping cart entry for a shopper.
    One shopper cannot have 2 rows for the same (product, variant).
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", "variant", name="uq_cart_line"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Supabase auth user id
    user_id: uuid.UUID = Field(index=True)

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    # Empty string when the product has no variants
    variant: str = Field(default="", max_length=100)

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    snapshot_price: Decimal = Field(
        max_digits=12,
        decimal_places=2,
        description="Price when added to cart",
    )

    product_title: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
