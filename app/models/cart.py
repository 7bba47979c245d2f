# app/models/cart.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    One line of a user's shopping cart.

    Two kinds of lines share this table:
      - catalog products (product_id set, is_custom_design=False);
        one user cannot have 2 rows for the same product
      - custom designs (product_id empty, custom_design document set);
        every add creates a new row
    """

    __tablename__ = "cart_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_item_id: str = Field(
        unique=True,
        index=True,
        max_length=64,
        description="Synthetic line id echoed back by clients",
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
        index=True,
    )

    is_custom_design: bool = Field(default=False)

    custom_design: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    snapshot_price: float = Field(
        description="Unit price when added to cart",
    )

    special_request: str = Field(default="", max_length=500)

    custom_photos: list[dict[str, Any]] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Customer photos attached to a catalog-product line",
    )

    added_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
