# boutique/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from boutique.core.auth import require_user
from boutique.database import get_session
from boutique.repositories.cart_repo import CartRepository
from boutique.repositories.product_repo import ProductRepository
from boutique.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary
from boutique.schemas.user import AuthUser
from boutique.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

service = CartService(CartRepository(), ProductRepository())


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    """
    Get the current shopper's cart with line totals and subtotal.
    """
    return service.get_cart_summary(session, current_user.id)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    """
    Add a product (optionally a specific variant) to the cart.

    Adding a product/variant already in the cart increases its quantity.
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    variant: str = "",
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    """
    Set the quantity of a product in the cart. Quantity 0 removes it.
    """
    return service.update_quantity(
        session=session,
        user_id=current_user.id,
        product_id=product_id,
        payload=payload,
        variant=variant.strip(),
    )


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: uuid.UUID,
    variant: str = "",
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    return service.remove_item(session, current_user.id, product_id, variant.strip())


@router.delete("", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_user),
):
    return service.clear_cart(session, current_user.id)
