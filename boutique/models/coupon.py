# boutique/models/coupon.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Coupon(SQLModel, table=True):
    """
    Discount rule managed from the admin dashboard.

    Rows are never handed to the pricing engine directly; the repository
    re-validates them through `CouponRead` first.
    """

    __tablename__ = "coupons"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Stored uppercase
    code: str = Field(
        max_length=50,
        unique=True,
        index=True,
    )

    # percentage | fixed
    discount_type: str = Field(max_length=20)

    discount_value: Decimal = Field(
        max_digits=12,
        decimal_places=2,
    )

    min_purchase: Decimal = Field(
        default=Decimal("0"),
        max_digits=12,
        decimal_places=2,
    )

    # None means unlimited
    max_uses: int | None = Field(default=None)

    used_count: int = Field(default=0)

    expires_at: datetime | None = Field(default=None)

    active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
