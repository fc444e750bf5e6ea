# boutique/routers/orders.py
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from boutique.core.auth import require_admin, require_user
from boutique.core.config import get_settings
from boutique.core.notifications import OrderNotifier, get_notifier
from boutique.database import get_session
from boutique.repositories.cart_repo import CartRepository
from boutique.repositories.coupon_repo import CouponRepository
from boutique.repositories.order_repo import OrderRepository
from boutique.repositories.product_repo import ProductRepository
from boutique.schemas.order import (
    CheckoutResult,
    OrderCreate,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from boutique.schemas.user import AuthUser
from boutique.services.coupon_service import CouponService
from boutique.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

settings = get_settings()
service = OrderService(
    OrderRepository(),
    CartRepository(),
    ProductRepository(),
    CouponService(CouponRepository(), settings.CLAMP_FIXED_DISCOUNT),
)


# -------- User-facing endpoints --------


@router.post(
    "/checkout",
    response_model=CheckoutResult,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    """
    Place an order from the current cart, optionally with a coupon.

    The order is created as 'pending' and the cart is emptied.
    """
    return service.checkout(session, current_user, payload)


@router.get("/me", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the shopper's orders, newest first (without items).
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get("/me/{order_id}", response_model=OrderWithItemsRead)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    return service.get_user_order(session, current_user.id, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    status_filter: OrderStatus | None = None,
):
    return service.list_all_orders(session, skip, limit, status_filter)


@router.get(
    "/{order_id}",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    notifier: OrderNotifier = Depends(get_notifier),
):
    """
    Accept or reject a pending order (admin only).

      pending  -> accepted, rejected

    The customer is emailed after the response is sent; a failed email
    does not undo the status change.
    """
    return service.update_status(
        session,
        order_id,
        payload,
        notify=lambda body: background_tasks.add_task(notifier.notify, body),
    )
