"""Typed failures raised by the pricing engine and its store adapters."""

from decimal import Decimal


class BoutiqueError(Exception):
    """Base exception for checkout and coupon failures."""

    code = "error"
    status_code = 400

    def extra(self) -> dict:
        """Additional fields for the JSON error body."""
        return {}


class EmptyCodeError(BoutiqueError):
    """Raised when the submitted coupon code is blank."""

    code = "empty_code"
    status_code = 400

    def __init__(self):
        super().__init__("Please enter a coupon code.")


class CouponNotFoundError(BoutiqueError):
    """Raised when no active coupon matches the code."""

    code = "not_found"
    status_code = 404

    def __init__(self, code: str):
        self.coupon_code = code
        super().__init__(f"Coupon {code} is not valid.")

    def extra(self) -> dict:
        return {"coupon_code": self.coupon_code}


class CouponExpiredError(BoutiqueError):
    """Raised when the coupon's expiry timestamp has passed."""

    code = "expired"
    status_code = 410

    def __init__(self, code: str):
        self.coupon_code = code
        super().__init__(f"Coupon {code} has expired.")

    def extra(self) -> dict:
        return {"coupon_code": self.coupon_code}


class CouponUsageExceededError(BoutiqueError):
    """Raised when the coupon has reached its maximum number of uses."""

    code = "usage_exceeded"
    status_code = 409

    def __init__(self, code: str):
        self.coupon_code = code
        super().__init__(f"Coupon {code} has reached its usage limit.")

    def extra(self) -> dict:
        return {"coupon_code": self.coupon_code}


class BelowMinimumError(BoutiqueError):
    """Raised when the cart subtotal is below the coupon's minimum purchase."""

    code = "below_minimum"
    status_code = 422

    def __init__(self, code: str, threshold: Decimal):
        self.coupon_code = code
        self.threshold = threshold
        super().__init__(
            f"Coupon {code} requires a minimum purchase of INR {threshold:.2f}."
        )

    def extra(self) -> dict:
        return {"coupon_code": self.coupon_code, "threshold": str(self.threshold)}


class EmptyCartError(BoutiqueError):
    """Raised when pricing or submitting an order with no line items."""

    code = "empty_cart"
    status_code = 400

    def __init__(self):
        super().__init__("Your cart is empty.")


class StorageError(BoutiqueError):
    """Raised when the coupon store fails to answer a lookup or increment."""

    code = "storage_error"
    status_code = 503

    def __init__(self, operation: str, reason: str | None = None):
        self.operation = operation
        msg = f"Coupon store unavailable during {operation}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
