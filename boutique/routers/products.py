# boutique/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from boutique.core.auth import require_admin
from boutique.database import get_session
from boutique.repositories.cart_repo import CartRepository
from boutique.repositories.product_repo import ProductRepository
from boutique.schemas.product import ProductCreate, ProductRead, ProductUpdate
from boutique.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

service = ProductService(ProductRepository(), CartRepository())


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    category: str | None = None,
):
    """
    List available products, newest first, optionally by category.
    """
    return service.list_products(
        session, skip=skip, limit=limit, only_available=True, category=category
    )


# -------- Admin endpoints --------


@router.get(
    "/admin/all",
    response_model=list[ProductRead],
    dependencies=[Depends(require_admin)],
)
def list_all_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List every product, including unavailable ones (admin only).
    """
    return service.list_products(session, skip=skip, limit=limit, only_available=False)


# Public, registered after /admin/all so that path is not parsed as an id
@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_product(session, product_id)


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product and drop it from every cart (admin only).
    Past orders keep their snapshotted line items.
    """
    service.delete_product(session, product_id)
