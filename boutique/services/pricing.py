# boutique/services/pricing.py
"""
Checkout pricing and coupon validation.

Pure, synchronous functions over an explicit `Cart`. The only I/O happens
through the two store capabilities passed in by the caller:

  - CouponLookup:  canonical code -> active coupon or None
  - CouponCounter: coupon id -> coupon with used_count + 1, or None when
                   the usage cap was already reached
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

from boutique.core.errors import (
    BelowMinimumError,
    BoutiqueError,
    CouponExpiredError,
    CouponNotFoundError,
    CouponUsageExceededError,
    EmptyCartError,
    EmptyCodeError,
    StorageError,
)
from boutique.schemas.cart import Cart
from boutique.schemas.coupon import CouponRead
from boutique.schemas.pricing import PricedOrderSummary

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class CouponLookup(Protocol):
    def __call__(self, code: str) -> CouponRead | None:
        """Return the active coupon for a canonical code, or None."""
        ...


class CouponCounter(Protocol):
    def __call__(self, coupon_id: uuid.UUID) -> CouponRead | None:
        """Atomically increment used_count if below max_uses.

        Returns the updated coupon, or None if the cap was reached.
        """
        ...


def canonicalize_code(raw: str | None) -> str:
    return (raw or "").strip().upper()


def compute_subtotal(cart: Cart) -> Decimal:
    """Sum of unit price x quantity; exactly 0 for an empty cart."""
    return sum(
        (item.unit_price * item.quantity for item in cart.items),
        start=ZERO,
    )


def validate_coupon(
    code: str,
    cart: Cart,
    lookup: CouponLookup,
    now: datetime | None = None,
) -> CouponRead:
    """
    Check that a coupon can be applied to the cart.

    Checks run in this order and the first failure wins:
    expiry, usage cap, minimum purchase.

    Never mutates the coupon; used_count only moves on redemption.

    Raises:
        EmptyCodeError, CouponNotFoundError, CouponExpiredError,
        CouponUsageExceededError, BelowMinimumError, StorageError
    """
    canonical = canonicalize_code(code)
    if not canonical:
        raise EmptyCodeError()

    try:
        coupon = lookup(canonical)
    except BoutiqueError:
        raise
    except Exception as exc:
        raise StorageError("coupon lookup", str(exc)) from exc

    if coupon is None or not coupon.active:
        raise CouponNotFoundError(canonical)

    now = now or datetime.now(timezone.utc)

    if coupon.expires_at is not None and coupon.expires_at < now:
        raise CouponExpiredError(coupon.code)

    if coupon.max_uses is not None and coupon.used_count >= coupon.max_uses:
        raise CouponUsageExceededError(coupon.code)

    if compute_subtotal(cart) < coupon.min_purchase:
        raise BelowMinimumError(coupon.code, coupon.min_purchase)

    return coupon


def compute_discount(
    cart: Cart,
    coupon: CouponRead | None,
    clamp: bool = False,
) -> Decimal:
    """
    Discount for the cart under the given coupon.

    Fixed-amount discounts are returned verbatim and may exceed the
    subtotal unless `clamp` is set.
    """
    if coupon is None:
        return ZERO

    if coupon.discount_type == "percentage":
        return compute_subtotal(cart) * coupon.discount_value / HUNDRED

    discount = coupon.discount_value
    if clamp:
        discount = min(discount, compute_subtotal(cart))
    return discount


def price_order(
    cart: Cart,
    coupon: CouponRead | None = None,
    clamp: bool = False,
) -> PricedOrderSummary:
    """
    Price a cart with an optional, already-validated coupon.

    Raises:
        EmptyCartError: the cart has no line items.
    """
    if cart.is_empty:
        raise EmptyCartError()

    subtotal = compute_subtotal(cart)
    discount = compute_discount(cart, coupon, clamp=clamp)

    return PricedOrderSummary(
        subtotal=subtotal,
        discount=discount,
        total=subtotal - discount,
        coupon_code=coupon.code if coupon else None,
    )


def record_coupon_usage(coupon: CouponRead, counter: CouponCounter) -> CouponRead:
    """
    Redeem a coupon once, after its order has been persisted.

    The cap is enforced by the store in the same statement as the
    increment, so concurrent checkouts cannot push used_count past
    max_uses. Callers must invoke this at most once per order.

    Raises:
        CouponUsageExceededError: the store rejected the increment.
        StorageError: the store failed to answer.
    """
    try:
        updated = counter(coupon.id)
    except BoutiqueError:
        raise
    except Exception as exc:
        raise StorageError("coupon redemption", str(exc)) from exc

    if updated is None:
        raise CouponUsageExceededError(coupon.code)
    return updated
