# app/services/wishlist_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.wishlist import WishlistItem
from app.repositories.product_repo import ProductRepository
from app.repositories.wishlist_repo import WishlistRepository
from app.schemas.product import ProductRead
from app.schemas.wishlist import WishlistRead, WishlistResponse


class WishlistService:
    """
    Business logic for the per-user wishlist.

    A wishlist always exists conceptually; an empty one is returned for
    users who never saved a product.
    """

    def __init__(self, wishlist_repo: WishlistRepository, product_repo: ProductRepository):
        self.wishlist_repo = wishlist_repo
        self.product_repo = product_repo

    def get_wishlist(self, session: Session, user_id: uuid.UUID) -> WishlistResponse:
        products = self.wishlist_repo.list_products(session, user_id)
        return WishlistResponse(
            wishlist=WishlistRead(
                products=[
                    ProductRead.model_validate(p, from_attributes=True)
                    for p in products
                ]
            )
        )

    def add_product(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistResponse:
        """Save a product; adding one that is already saved is a no-op."""
        if not self.product_repo.get_by_id(session, product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        if not self.wishlist_repo.get(session, user_id, product_id):
            self.wishlist_repo.create(
                session, WishlistItem(user_id=user_id, product_id=product_id)
            )
        return self.get_wishlist(session, user_id)

    def remove_product(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistResponse:
        item = self.wishlist_repo.get(session, user_id, product_id)
        if item:
            self.wishlist_repo.delete(session, item)
        return self.get_wishlist(session, user_id)
