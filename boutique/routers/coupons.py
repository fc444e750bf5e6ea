# boutique/routers/coupons.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from boutique.core.auth import require_admin, require_user
from boutique.core.config import get_settings
from boutique.database import get_session
from boutique.repositories.cart_repo import CartRepository
from boutique.repositories.coupon_repo import CouponRepository
from boutique.repositories.product_repo import ProductRepository
from boutique.schemas.coupon import (
    CouponApply,
    CouponApplyResult,
    CouponCreate,
    CouponRead,
    CouponUpdate,
)
from boutique.schemas.user import AuthUser
from boutique.services.cart_service import CartService
from boutique.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["Coupons"])

settings = get_settings()
service = CouponService(CouponRepository(), settings.CLAMP_FIXED_DISCOUNT)
cart_service = CartService(CartRepository(), ProductRepository())


# -------- Shopper endpoints --------


@router.post("/apply", response_model=CouponApplyResult)
def apply_coupon(
    payload: CouponApply,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    """
    Preview a coupon against the current cart.

    Nothing is redeemed here; the code is checked again at checkout.
    Failures come back as typed errors (`code`: empty_code, not_found,
    expired, usage_exceeded, below_minimum, empty_cart).
    """
    cart = cart_service.get_cart(session, current_user.id)
    return service.apply_to_cart(session, payload.code, cart)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[CouponRead],
    dependencies=[Depends(require_admin)],
)
def list_coupons(session: Session = Depends(get_session)):
    return service.list_coupons(session)


@router.post(
    "",
    response_model=CouponRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_coupon(
    payload: CouponCreate,
    session: Session = Depends(get_session),
):
    """
    Create a coupon. The code is stored uppercase and must be unique.
    """
    return service.create_coupon(session, payload)


@router.patch(
    "/{coupon_id}",
    response_model=CouponRead,
    dependencies=[Depends(require_admin)],
)
def update_coupon(
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    session: Session = Depends(get_session),
):
    return service.update_coupon(session, coupon_id, payload)


@router.post(
    "/{coupon_id}/toggle",
    response_model=CouponRead,
    dependencies=[Depends(require_admin)],
)
def toggle_coupon(
    coupon_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Flip the active flag (admin only).
    """
    return service.toggle_coupon(session, coupon_id)


@router.delete(
    "/{coupon_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_coupon(
    coupon_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_coupon(session, coupon_id)
