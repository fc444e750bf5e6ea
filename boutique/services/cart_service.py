# boutique/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from boutique.models.cart import CartItem
from boutique.repositories.cart_repo import CartRepository
from boutique.repositories.product_repo import ProductRepository
from boutique.schemas.cart import (
    Cart,
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartSummary,
    LineItem,
)
from boutique.services.pricing import compute_subtotal


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and availability
      - snapshot the product price and title when an item is added
      - keep one row per (product, variant): re-adding increments
      - quantity 0 removes the row
      - materialize the rows as a `Cart` for pricing
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_available_product(self, session: Session, product_id: uuid.UUID):
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.available:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is not available",
            )
        return product

    def _get_existing_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        variant: str,
    ) -> CartItem:
        item = self.cart_repo.get_item(session, user_id, product_id, variant)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not in cart",
            )
        return item

    @staticmethod
    def to_cart(rows: list[CartItem]) -> Cart:
        return Cart(
            items=[
                LineItem(
                    id=str(row.product_id),
                    title=row.product_title,
                    unit_price=row.snapshot_price,
                    quantity=row.quantity,
                    variant=row.variant,
                )
                for row in rows
            ]
        )

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> Cart:
        return self.to_cart(self.cart_repo.list_for_user(session, user_id))

    def get_cart_summary(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        rows = self.cart_repo.list_for_user(session, user_id)
        cart = self.to_cart(rows)

        return CartSummary(
            items=[
                CartItemRead(
                    id=row.id,
                    product_id=row.product_id,
                    product_title=row.product_title,
                    variant=row.variant,
                    quantity=row.quantity,
                    snapshot_price=row.snapshot_price,
                    line_total=row.snapshot_price * row.quantity,
                    created_at=row.created_at,
                )
                for row in rows
            ],
            total_quantity=cart.total_quantity,
            subtotal=compute_subtotal(cart),
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product to the shopper's cart.

        An existing (product, variant) row keeps its original snapshot
        price and only has its quantity increased.
        """
        product = self._get_available_product(session, payload.product_id)
        existing = self.cart_repo.get_item(
            session, user_id, payload.product_id, payload.variant
        )

        if existing:
            existing.quantity += payload.quantity
            self.cart_repo.update(session, existing)
        else:
            self.cart_repo.create(
                session,
                CartItem(
                    user_id=user_id,
                    product_id=product.id,
                    variant=payload.variant,
                    quantity=payload.quantity,
                    snapshot_price=product.price,
                    product_title=product.title,
                ),
            )

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        payload: CartItemUpdate,
        variant: str = "",
    ) -> CartSummary:
        """
        Set the quantity of an item already in the cart; 0 removes it.
        """
        item = self._get_existing_item(session, user_id, product_id, variant)

        if payload.quantity == 0:
            self.cart_repo.delete(session, item)
        else:
            item.quantity = payload.quantity
            self.cart_repo.update(session, item)

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        variant: str = "",
    ) -> CartSummary:
        item = self._get_existing_item(session, user_id, product_id, variant)
        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        self.cart_repo.clear_user_cart(session, user_id)
        return CartSummary(items=[], total_quantity=0, subtotal=0)
