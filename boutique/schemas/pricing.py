# boutique/schemas/pricing.py
from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer
from sqlmodel import SQLModel

# Decimal internally, plain JSON numbers on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class PricedOrderSummary(SQLModel):
    """
    Output of the pricing engine.

    total == subtotal - discount always; coupon_code is the canonical
    code of the applied coupon, if any.
    """

    subtotal: Money
    discount: Money
    total: Money
    coupon_code: str | None = None
