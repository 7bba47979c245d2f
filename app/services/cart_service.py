# app/services/cart_service.py
import logging
import math
import uuid
from typing import Any

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.ids import new_cart_item_id
from app.models.cart import CartItem
from app.models.product import Product
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    MAX_CUSTOMER_PHOTOS,
    CartAddRequest,
    CartItemRead,
    CartRemoveRequest,
    CartResponse,
    CartUpdateRequest,
    CustomDesign,
    CustomerPhoto,
)
from app.schemas.product import ProductRead

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - ensure only 'user' accounts use cart (via router dependency)
      - validate product existence, active flag and stock
      - validate and normalize custom design documents
      - resolve lines by cart_item_id / product id
      - compute line totals and cart totals
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is inactive",
            )
        return product

    @staticmethod
    def _parse_uuid(raw: str) -> uuid.UUID:
        try:
            return uuid.UUID(raw)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid product ID format",
            )

    @staticmethod
    def _normalize_custom_design(design: CustomDesign) -> dict[str, Any]:
        """
        Check required fields and fill defaults of a custom design.

        Rules:
          - name and a positive price are required
          - image must be an embedded `data:image/...` payload
          - pricing.final_price always equals price
          - specifications.material/size fall back to the chosen
            material/size names
        """
        price = design.price
        valid_price = price is not None and math.isfinite(price) and price > 0
        if not design.name.strip() or not valid_price:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Custom design must have name and price",
            )
        if not design.image.startswith("data:image/"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Custom design must have valid image data",
            )

        normalized = design.model_copy(deep=True)
        normalized.name = design.name.strip()
        normalized.pricing.final_price = design.price
        normalized.specifications.material = (
            design.specifications.material or design.material.name
        )
        normalized.specifications.size = (
            design.specifications.size or design.size.name
        )
        return normalized.model_dump(mode="json", by_alias=True)

    @staticmethod
    def _check_photos(photos: list[CustomerPhoto]) -> list[dict[str, Any]] | None:
        """Validate attached customer photos and return them ready to store."""
        if not photos:
            return None
        if len(photos) > MAX_CUSTOMER_PHOTOS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum {MAX_CUSTOMER_PHOTOS} photos allowed",
            )
        for i, photo in enumerate(photos, start=1):
            if not photo.has_valid_image:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Photo {i} is not a valid image",
                )
        ordered = sorted(photos, key=lambda p: p.order)
        return [p.model_dump(mode="json", by_alias=True) for p in ordered]

    def _find_line(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: str | None,
        cart_item_id: str | None,
        is_custom: bool,
    ) -> CartItem | None:
        """
        Resolve a cart line from the identifiers a client echoes back.

        Order:
          1. cart_item_id (any kind of line)
          2. product_id as row id (custom designs) or catalog product id
        """
        if not product_id and not cart_item_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product ID or Cart Item ID is required",
            )

        if cart_item_id:
            item = self.cart_repo.get_by_cart_item_id(session, user_id, cart_item_id)
            if item:
                return item

        if product_id:
            pid = self._parse_uuid(product_id)
            if is_custom:
                return self.cart_repo.get_by_id(session, user_id, pid)
            return self.cart_repo.get_product_line(session, user_id, pid)

        return None

    def _to_read(self, session: Session, item: CartItem) -> CartItemRead:
        if item.is_custom_design and item.custom_design:
            design = CustomDesign.model_validate(item.custom_design)
            return CartItemRead(
                id=item.id,
                cart_item_id=item.cart_item_id,
                is_custom_design=True,
                custom_design=design,
                name=design.name or "Custom Design",
                price=item.snapshot_price,
                image=design.image,
                quantity=item.quantity,
                special_request=item.special_request,
                line_total=item.quantity * item.snapshot_price,
                added_at=item.added_at,
            )

        product = (
            self.product_repo.get_by_id(session, item.product_id)
            if item.product_id
            else None
        )
        return CartItemRead(
            id=item.id,
            cart_item_id=item.cart_item_id,
            product_id=item.product_id,
            product=(
                ProductRead.model_validate(product, from_attributes=True)
                if product
                else None
            ),
            is_custom_design=False,
            custom_photos=[
                CustomerPhoto.model_validate(p) for p in item.custom_photos or []
            ],
            name=product.name if product else "Unavailable product",
            price=item.snapshot_price,
            image=product.hero_image_url if product else None,
            quantity=item.quantity,
            special_request=item.special_request,
            line_total=item.quantity * item.snapshot_price,
            added_at=item.added_at,
        )

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> CartResponse:
        """
        Return the full cart:
          - list of CartItemRead (with line_total)
          - total_quantity
          - total_price
        """
        items = [
            self._to_read(session, it)
            for it in self.cart_repo.list_for_user(session, user_id)
        ]
        return CartResponse(
            items=items,
            total_quantity=sum(it.quantity for it in items),
            total_price=sum(it.line_total for it in items),
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartAddRequest,
    ) -> CartResponse:
        """
        Add a custom design or a catalog product to the user's cart.

        Rules:
          - custom designs always create a new line
          - catalog product must exist, be active and have enough stock;
            an existing line for the same product is increased instead
          - price is snapshotted at add time
          - customer photos (at most 10) go on catalog-product lines and
            replace the photos of an existing line
        """
        if payload.custom_design is not None:
            design = self._normalize_custom_design(payload.custom_design)
            item = CartItem(
                cart_item_id=new_cart_item_id("custom"),
                user_id=user_id,
                is_custom_design=True,
                custom_design=design,
                quantity=payload.quantity,
                snapshot_price=design["price"],
                special_request=payload.special_request,
            )
            self.cart_repo.create(session, item)
            logger.info(f"Custom design {design['name']!r} added to cart of {user_id}")
            return self.get_cart(session, user_id)

        if payload.product_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product ID is required for regular products",
            )

        photos = self._check_photos(payload.photos())
        product = self._get_valid_product(session, payload.product_id)
        existing = self.cart_repo.get_product_line(session, user_id, product.id)
        new_qty = payload.quantity + (existing.quantity if existing else 0)

        if new_qty > product.stock_on_hand:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Not enough stock available",
            )

        if existing:
            existing.quantity = new_qty
            existing.special_request = payload.special_request
            if photos is not None:
                existing.custom_photos = photos
            self.cart_repo.update(session, existing)
        else:
            self.cart_repo.create(
                session,
                CartItem(
                    cart_item_id=new_cart_item_id("item"),
                    user_id=user_id,
                    product_id=product.id,
                    quantity=payload.quantity,
                    snapshot_price=product.price,
                    special_request=payload.special_request,
                    custom_photos=photos,
                ),
            )

        return self.get_cart(session, user_id)

    def update_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartUpdateRequest,
    ) -> CartResponse:
        """
        Set the quantity of a cart line.

        Raises 400 for quantity < 1 (clients remove lines instead),
        404 if the line does not exist.
        """
        if payload.quantity < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Quantity must be at least 1",
            )

        item = self._find_line(
            session, user_id, payload.product_id, payload.cart_item_id, payload.is_custom
        )
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        if not item.is_custom_design and item.product_id:
            product = self._get_valid_product(session, item.product_id)
            if payload.quantity > product.stock_on_hand:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Not enough stock available",
                )

        item.quantity = payload.quantity
        self.cart_repo.update(session, item)
        return self.get_cart(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartRemoveRequest,
    ) -> CartResponse:
        item = self._find_line(
            session, user_id, payload.product_id, payload.cart_item_id, payload.is_custom
        )
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        self.cart_repo.delete(session, item)
        return self.get_cart(session, user_id)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartResponse:
        """
        Clear all items from the cart and return an empty cart.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        return CartResponse(items=[], total_quantity=0, total_price=0.0)
