# app/routers/wishlist.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_user
from app.database import get_session
from app.models.user import User
from app.repositories.product_repo import ProductRepository
from app.repositories.wishlist_repo import WishlistRepository
from app.schemas.wishlist import WishlistChangeRequest, WishlistResponse
from app.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

service = WishlistService(WishlistRepository(), ProductRepository())


@router.get("", response_model=WishlistResponse)
def get_my_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Get current user's wishlist (empty if nothing was saved yet).
    """
    return service.get_wishlist(session, current_user.id)


@router.post("/add", response_model=WishlistResponse)
def add_to_wishlist(
    payload: WishlistChangeRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    return service.add_product(session, current_user.id, payload.product_id)


@router.post("/remove", response_model=WishlistResponse)
def remove_from_wishlist(
    payload: WishlistChangeRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    return service.remove_product(session, current_user.id, payload.product_id)
