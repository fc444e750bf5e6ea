# boutique/repositories/cart_repo.py
import uuid

from sqlmodel import Session, select

from boutique.models.cart import CartItem


class CartRepository:

    # Get items for a shopper, oldest first
    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return session.exec(stmt).all()

    def get_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        variant: str = "",
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
            CartItem.variant == variant,
        )
        return session.exec(stmt).first()

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.commit()

    def delete_for_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Drop a product from every cart. Flushes but does not commit.
        """
        stmt = select(CartItem).where(CartItem.product_id == product_id)
        for row in session.exec(stmt).all():
            session.delete(row)
        session.flush()
