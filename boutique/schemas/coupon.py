# boutique/schemas/coupon.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from boutique.schemas.pricing import Money, PricedOrderSummary

DiscountType = Literal["percentage", "fixed"]


def _as_utc(v: datetime | None) -> datetime | None:
    # Postgres returns aware values; SQLite and date-only admin input do not
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


def _canonical_code(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("code cannot be empty")
    return v


# Only max_uses and expires_at may be cleared with null
NON_NULLABLE_ON_UPDATE = ("code", "discount_type", "discount_value", "min_purchase", "active")


class CouponRead(SQLModel):
    """
    Fully-typed coupon record.

    Every row read from the coupons table passes through this model
    before it reaches pricing code; malformed rows fail validation.
    """

    id: uuid.UUID
    code: str
    discount_type: DiscountType
    discount_value: Money = Field(ge=0)
    min_purchase: Money = Field(default=Decimal("0"), ge=0)
    max_uses: int | None = Field(default=None, ge=1)
    used_count: int = Field(default=0, ge=0)
    expires_at: datetime | None = None
    active: bool
    created_at: datetime | None = None

    @field_validator("code")
    @classmethod
    def uppercase_code(cls, v: str) -> str:
        return _canonical_code(v)

    @field_validator("min_purchase", mode="before")
    @classmethod
    def default_min_purchase(cls, v):
        return Decimal("0") if v is None else v

    @field_validator("expires_at", "created_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class CouponCreate(SQLModel):
    """
    Admin payload for creating a coupon.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(max_length=50)
    discount_type: DiscountType
    discount_value: Decimal = Field(ge=0)
    min_purchase: Decimal = Field(default=Decimal("0"), ge=0)
    max_uses: int | None = Field(default=None, ge=1)
    expires_at: datetime | None = None
    active: bool = True

    @field_validator("code")
    @classmethod
    def uppercase_code(cls, v: str) -> str:
        return _canonical_code(v)

    @field_validator("expires_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)

    @model_validator(mode="after")
    def percentage_in_range(self):
        if self.discount_type == "percentage" and self.discount_value > 100:
            raise ValueError("percentage discount cannot exceed 100")
        return self


class CouponUpdate(SQLModel):
    """
    Partial update payload for coupons.
    All fields are optional; only `max_uses`/`expires_at` accept null, which clears them.
    """

    model_config = ConfigDict(extra="forbid")

    code: str | None = Field(default=None, max_length=50)
    discount_type: DiscountType | None = None
    discount_value: Decimal | None = Field(default=None, ge=0)
    min_purchase: Decimal | None = Field(default=None, ge=0)
    max_uses: int | None = Field(default=None, ge=1)
    expires_at: datetime | None = None
    active: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def reject_null_fields(cls, data):
        if isinstance(data, dict):
            nulled = [k for k in NON_NULLABLE_ON_UPDATE if k in data and data[k] is None]
            if nulled:
                raise ValueError(f"{', '.join(nulled)} cannot be null")
        return data

    @field_validator("code")
    @classmethod
    def uppercase_code(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _canonical_code(v)

    @field_validator("expires_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class CouponApply(SQLModel):
    """
    Shopper payload to preview a coupon against the current cart.
    """

    code: str


class CouponApplyResult(PricedOrderSummary):
    """
    Priced cart with the applied coupon described for display.
    """

    message: str
