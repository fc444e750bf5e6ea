# boutique/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel

from boutique.schemas.pricing import Money

OrderStatus = Literal["pending", "accepted", "rejected"]
RedemptionOutcome = Literal["redeemed", "usage_exceeded", "failed"]


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - customer_name, phone_number, address
      - notes (optional)
      - coupon_code (optional)
      - customer_email (optional; defaults to the account email)

    Backend derives:
      - subtotal / discount / total from the cart and coupon
      - status = 'pending'
      - items from cart
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str
    phone_number: str
    address: str
    customer_email: EmailStr | None = None
    notes: str | None = None
    coupon_code: str | None = None

    @field_validator("customer_name", "phone_number", "address")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("notes", "coupon_code")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    customer_name: str
    customer_email: str
    phone_number: str
    address: str
    notes: str | None
    subtotal: Money
    discount: Money
    total_amount: Money
    coupon_code: str | None
    status: OrderStatus
    created_at: datetime


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    title: str
    variant: str
    quantity: int
    unit_price: Money
    line_total: Money


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class CheckoutResult(OrderWithItemsRead):
    """
    Checkout response.

    coupon_redemption is None when no coupon was used. A value other than
    "redeemed" means the order stands but the coupon was not counted.
    """

    coupon_redemption: RedemptionOutcome | None = None
    coupon_message: str | None = None


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
