# boutique/services/product_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from boutique.models.product import Product
from boutique.repositories.cart_repo import CartRepository
from boutique.repositories.product_repo import ProductRepository
from boutique.schemas.product import ProductCreate, ProductUpdate


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - public listing hides unavailable products
      - admin-only operations (enforced at router via require_admin)
      - removing a deleted product from shoppers' carts
    """

    def __init__(self, repo: ProductRepository, cart_repo: CartRepository):
        self.repo = repo
        self.cart_repo = cart_repo

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_available: bool = True,
        category: str | None = None,
    ) -> list[Product]:
        return self.repo.list(
            session,
            skip=skip,
            limit=limit,
            only_available=only_available,
            category=category,
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product.model_validate(payload)
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update; fields left out of the payload are untouched.

        Prices already snapshotted into carts and orders do not change.
        """
        product = self.get_product(session, product_id)
        product.sqlmodel_update(payload.model_dump(exclude_unset=True))
        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        product = self.get_product(session, product_id)
        self.cart_repo.delete_for_product(session, product.id)
        self.repo.delete(session, product)
