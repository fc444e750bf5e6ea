# boutique/repositories/product_repo.py
import uuid

from sqlmodel import Session, select

from boutique.models.product import Product


class ProductRepository:
    """
    Data access layer for the catalog.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_available: bool = True,
        category: str | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if only_available:
            stmt = stmt.where(Product.available == True)  # noqa: E712
        if category:
            stmt = stmt.where(Product.category == category)
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
