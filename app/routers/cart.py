# app/routers/cart.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_user
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartAddRequest,
    CartRemoveRequest,
    CartResponse,
    CartUpdateRequest,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartResponse)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Get current user's cart.

    Auth:
      - Only role='user' (customer) can access.
      - Admins are forbidden.
    """
    return service.get_cart(session, current_user.id)


@router.post("/add", response_model=CartResponse)
def add_to_cart(
    payload: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Add a catalog product (`productId`) or a custom design (`customDesign`).

    Returns the updated cart.
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.post("/update", response_model=CartResponse)
def update_cart_item(
    payload: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """Set the quantity of a line addressed by `cartItemId` or `productId`."""
    return service.update_item(session, current_user.id, payload)


@router.post("/remove", response_model=CartResponse)
def remove_cart_item(
    payload: CartRemoveRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """Remove a line addressed by `cartItemId` or `productId`."""
    return service.remove_item(session, current_user.id, payload)


@router.post("/clear", response_model=CartResponse)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    return service.clear_cart(session, current_user.id)
