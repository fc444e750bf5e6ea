# boutique/services/order_service.py
import logging
import uuid
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable

from fastapi import HTTPException, status
from sqlmodel import Session

from boutique.core.errors import CouponUsageExceededError, EmptyCartError, StorageError
from boutique.core.notifications import build_order_email_payload
from boutique.models.cart import CartItem
from boutique.models.order import Order, OrderItem
from boutique.repositories.cart_repo import CartRepository
from boutique.repositories.order_repo import OrderRepository
from boutique.repositories.product_repo import ProductRepository
from boutique.schemas.order import (
    CheckoutResult,
    OrderCreate,
    OrderItemRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from boutique.schemas.user import AuthUser
from boutique.services import pricing
from boutique.services.cart_service import CartService
from boutique.services.coupon_service import CouponService

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# pending -> accepted | rejected; both are final
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"accepted", "rejected"},
    "accepted": set(),
    "rejected": set(),
}


def to_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - price the cart (with an optional coupon) and persist the order
      - redeem the coupon strictly after the order is committed
      - clear the cart in the same transaction as the order insert
      - admin status transitions and the notifications they trigger
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        coupon_service: CouponService,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.coupon_service = coupon_service

    # -------- User-facing operations --------

    def checkout(
        self,
        session: Session,
        user: AuthUser,
        payload: OrderCreate,
    ) -> CheckoutResult:
        """
        Convert the shopper's cart into a pending Order.

        Steps:
          1. Load cart; EmptyCartError if empty.
          2. Ensure every product is still available.
          3. Validate the coupon, if given (coupon errors propagate).
          4. Price the cart.
          5. Insert Order + OrderItems, delete cart rows, commit.
          6. Redeem the coupon. Failures here are reported on the
             response and logged; the committed order stands.
        """
        rows: list[CartItem] = self.cart_repo.list_for_user(session, user.id)
        cart = CartService.to_cart(rows)
        if cart.is_empty:
            raise EmptyCartError()

        self._ensure_products_available(session, rows)

        coupon = None
        if payload.coupon_code:
            coupon = self.coupon_service.validate(session, payload.coupon_code, cart)

        summary = pricing.price_order(
            cart, coupon, clamp=self.coupon_service.clamp_fixed_discount
        )
        subtotal = to_money(summary.subtotal)
        discount = to_money(summary.discount)

        order = Order(
            user_id=user.id,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email or user.email,
            phone_number=payload.phone_number,
            address=payload.address,
            notes=payload.notes,
            subtotal=subtotal,
            discount=discount,
            total_amount=subtotal - discount,
            coupon_code=summary.coupon_code,
            status="pending",
        )
        items = [
            OrderItem(
                order_id=order.id,
                product_id=row.product_id,
                title=row.product_title,
                variant=row.variant,
                quantity=row.quantity,
                unit_price=row.snapshot_price,
            )
            for row in rows
        ]
        self.order_repo.place(session, order, items, rows)
        session.commit()
        session.refresh(order)
        for item in items:
            session.refresh(item)
        logger.info(
            "Order %s placed by %s: total %s (coupon %s)",
            order.id,
            order.customer_email,
            order.total_amount,
            order.coupon_code or "-",
        )

        dto = self._build_order_with_items_dto(order, items)
        result = CheckoutResult(**dto.model_dump())

        if coupon is not None:
            try:
                self.coupon_service.redeem(session, coupon)
                result.coupon_redemption = "redeemed"
            except CouponUsageExceededError as exc:
                logger.warning(
                    "Order %s kept its discount but coupon %s hit its cap at redemption",
                    order.id,
                    coupon.code,
                )
                result.coupon_redemption = "usage_exceeded"
                result.coupon_message = str(exc)
            except StorageError as exc:
                logger.error(
                    "Order %s placed but coupon %s redemption was not recorded: %s",
                    order.id,
                    coupon.code,
                    exc,
                )
                result.coupon_redemption = "failed"
                result.coupon_message = str(exc)

        return result

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        return self.order_repo.list_for_user(session, user_id, skip, limit)

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        404 if the order does not exist or belongs to someone else.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        items = self.order_repo.items_for(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[Order]:
        return self.order_repo.list_all(session, skip, limit, status=status_filter)

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self._get_order(session, order_id)
        items = self.order_repo.items_for(session, order.id)
        return self._build_order_with_items_dto(order, items)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
        notify: Callable[[dict[str, Any]], Any] | None = None,
    ) -> Order:
        """
        Admin-only status update:

          pending  -> accepted, rejected
          accepted -> (no change)
          rejected -> (no change)

        Setting the current status again is a no-op. After a successful
        transition the notification payload is handed to `notify`, whose
        outcome never affects the committed status.
        """
        order = self._get_order(session, order_id)

        current = order.status
        new = payload.status

        if current == new:
            return order

        if new not in ALLOWED_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        self.order_repo.set_status(session, order, new)
        session.commit()
        session.refresh(order)
        logger.info("Order %s moved %s -> %s", order.id, current, new)

        if notify is not None:
            items = self.order_repo.items_for(session, order.id)
            notify(build_order_email_payload(order, items))

        return order

    # -------- Helpers --------

    def _get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def _ensure_products_available(self, session: Session, rows: list[CartItem]) -> None:
        errors: list[dict[str, str]] = []
        for row in rows:
            product = self.product_repo.get_by_id(session, row.product_id)
            if product is None:
                errors.append({"product_id": str(row.product_id), "reason": "Product not found"})
            elif not product.available:
                errors.append(
                    {"product_id": str(row.product_id), "reason": "Product is not available"}
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        return OrderWithItemsRead(
            id=order.id,
            user_id=order.user_id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            phone_number=order.phone_number,
            address=order.address,
            notes=order.notes,
            subtotal=order.subtotal,
            discount=order.discount,
            total_amount=order.total_amount,
            coupon_code=order.coupon_code,
            status=order.status,
            created_at=order.created_at,
            items=[
                OrderItemRead(
                    id=it.id,
                    product_id=it.product_id,
                    title=it.title,
                    variant=it.variant,
                    quantity=it.quantity,
                    unit_price=it.unit_price,
                    line_total=it.unit_price * it.quantity,
                )
                for it in items
            ],
        )
