# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Shopper or shop-owner account.

    Identity:
      - id: MUST match the identity provider's user id (UUID from JWT "sub")
      - email comes from the token and is never edited here

    Role:
      - "user" (shopper) | "admin" (shop owner)
      - guests have no row and no token

    The contact and shipping fields are what the storefront's profile page
    edits; handmade pieces are shipped to this address.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches the token 'sub' claim",
    )

    email: str = Field(unique=True, index=True)

    name: str = Field(
        max_length=50,
        description="Display name; local part of the email until edited",
    )

    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=80)
    state: str | None = Field(default=None, max_length=80)
    country: str = Field(default="India", max_length=80)
    avatar_url: str | None = Field(default=None)

    role: str = Field(default="user", index=True)

    is_active: bool = Field(
        default=True,
        description="Disabled accounts are refused on every authenticated route",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @property
    def has_shipping_address(self) -> bool:
        return bool(self.address and self.city and self.state)
