# boutique/services/coupon_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from boutique.core.errors import EmptyCartError
from boutique.models.coupon import Coupon
from boutique.repositories.coupon_repo import CouponRepository
from boutique.schemas.cart import Cart
from boutique.schemas.coupon import (
    CouponApplyResult,
    CouponCreate,
    CouponRead,
    CouponUpdate,
)
from boutique.services import pricing

logger = logging.getLogger(__name__)


def describe_discount(coupon: CouponRead) -> str:
    if coupon.discount_type == "percentage":
        return f"{coupon.discount_value.normalize():f}% off"
    return f"INR {coupon.discount_value:.2f} off"


class CouponService:
    """
    Coupon management and the shopper-facing coupon preview.

    Wires `CouponRepository` into the pricing engine as its lookup and
    counter capabilities, bound to the current DB session.
    """

    def __init__(self, repo: CouponRepository, clamp_fixed_discount: bool = False):
        self.repo = repo
        self.clamp_fixed_discount = clamp_fixed_discount

    # ---- pricing collaborators ----

    def validate(self, session: Session, code: str, cart: Cart) -> CouponRead:
        """
        Raises the pricing engine's coupon errors unchanged.
        """
        return pricing.validate_coupon(
            code,
            cart,
            lambda canonical: self.repo.get_active_by_code(session, canonical),
        )

    def redeem(self, session: Session, coupon: CouponRead) -> CouponRead:
        def counter(coupon_id: uuid.UUID) -> CouponRead | None:
            try:
                return self.repo.increment_usage_if_below_cap(session, coupon_id)
            except SQLAlchemyError:
                session.rollback()
                raise

        updated = pricing.record_coupon_usage(coupon, counter)
        logger.info(
            "Coupon %s redeemed (%s/%s)",
            updated.code,
            updated.used_count,
            updated.max_uses if updated.max_uses is not None else "unlimited",
        )
        return updated

    def apply_to_cart(self, session: Session, code: str, cart: Cart) -> CouponApplyResult:
        """
        Validate a code against the cart and price it, without redeeming.
        """
        # Checked before the store is queried
        if cart.is_empty:
            raise EmptyCartError()

        coupon = self.validate(session, code, cart)
        summary = pricing.price_order(cart, coupon, clamp=self.clamp_fixed_discount)

        return CouponApplyResult(
            **summary.model_dump(),
            message=f"{coupon.code} applied: {describe_discount(coupon)}",
        )

    # ---- admin CRUD ----

    def _get_coupon(self, session: Session, coupon_id: uuid.UUID) -> Coupon:
        coupon = self.repo.get_by_id(session, coupon_id)
        if not coupon:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Coupon not found",
            )
        return coupon

    def _ensure_code_free(
        self,
        session: Session,
        code: str,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        existing = self.repo.get_by_code(session, code)
        if existing is not None and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Coupon code {code} already exists",
            )

    def list_coupons(self, session: Session) -> list[Coupon]:
        return self.repo.list(session)

    def create_coupon(self, session: Session, payload: CouponCreate) -> Coupon:
        self._ensure_code_free(session, payload.code)
        coupon = self.repo.create(session, Coupon.model_validate(payload))
        logger.info("Coupon %s created", coupon.code)
        return coupon

    def update_coupon(
        self,
        session: Session,
        coupon_id: uuid.UUID,
        payload: CouponUpdate,
    ) -> Coupon:
        """
        Partial update. used_count is never editable here.

        Raises:
            HTTPException(409): the new code belongs to another coupon.
            HTTPException(400): the result would be a percentage above 100.
        """
        coupon = self._get_coupon(session, coupon_id)
        changes = payload.model_dump(exclude_unset=True)

        if "code" in changes:
            self._ensure_code_free(session, changes["code"], exclude_id=coupon.id)

        discount_type = changes.get("discount_type", coupon.discount_type)
        discount_value = changes.get("discount_value", coupon.discount_value)
        if discount_type == "percentage" and discount_value > 100:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="percentage discount cannot exceed 100",
            )

        coupon.sqlmodel_update(changes)
        return self.repo.update(session, coupon)

    def toggle_coupon(self, session: Session, coupon_id: uuid.UUID) -> Coupon:
        coupon = self._get_coupon(session, coupon_id)
        coupon.active = not coupon.active
        coupon = self.repo.update(session, coupon)
        logger.info(
            "Coupon %s %s", coupon.code, "activated" if coupon.active else "deactivated"
        )
        return coupon

    def delete_coupon(self, session: Session, coupon_id: uuid.UUID) -> None:
        coupon = self._get_coupon(session, coupon_id)
        self.repo.delete(session, coupon)
