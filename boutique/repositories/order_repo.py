# boutique/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from boutique.models.cart import CartItem
from boutique.models.order import Order, OrderItem
from boutique.schemas.order import OrderStatus


class OrderRepository:
    """
    Orders and their snapshotted line items.

    Nothing here commits: checkout writes the order, its items and the
    cart deletion as one unit, and the service owns that commit.
    """

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    # Admin queue, optionally one status only
    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status: OrderStatus | None = None,
    ) -> list[Order]:
        stmt = select(Order)
        if status:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def items_for(self, session: Session, order_id: uuid.UUID) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        return session.exec(stmt).all()

    def place(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
        cart_rows: list[CartItem],
    ) -> None:
        """
        Stage the order and its items and drop the cart rows they came from.
        """
        session.add(order)
        session.flush()
        session.add_all(items)
        for row in cart_rows:
            session.delete(row)
        session.flush()

    def set_status(self, session: Session, order: Order, status: OrderStatus) -> None:
        order.status = status
        session.add(order)
