# app/schemas/wishlist.py
import uuid

from app.schemas.base import CamelModel
from app.schemas.product import ProductRead


class WishlistChangeRequest(CamelModel):
    """Payload for POST /wishlist/add and /wishlist/remove."""

    product_id: uuid.UUID


class WishlistRead(CamelModel):
    products: list[ProductRead]


class WishlistResponse(CamelModel):
    success: bool = True
    wishlist: WishlistRead
