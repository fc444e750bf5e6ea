# boutique/models/order.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order.

    Money columns are stored at 2 decimal places and
    total_amount == subtotal - discount on every row.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(index=True)

    customer_name: str
    customer_email: str = Field(index=True)
    phone_number: str
    address: str
    notes: str | None = None

    subtotal: Decimal = Field(max_digits=12, decimal_places=2)
    discount: Decimal = Field(
        default=Decimal("0"),
        max_digits=12,
        decimal_places=2,
    )
    total_amount: Decimal = Field(max_digits=12, decimal_places=2)

    coupon_code: str | None = Field(default=None, max_length=50)

    # pending | accepted | rejected
    status: str = Field(
        default="pending",
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order, snapshotted from the cart at checkout.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    # No FK: products may be deleted while their orders stay on record
    product_id: uuid.UUID = Field(index=True)

    title: str
    variant: str = Field(default="")

    quantity: int = Field(gt=0)

    unit_price: Decimal = Field(max_digits=12, decimal_places=2)
