# app/client/items.py
"""
Client-side cart lines.

A cart line is either a LocalCartItem (held only in this client and its
local storage slot) or a ServerCartItem (a copy of a line the API
returned). The two are told apart by ``kind``, never by probing optional
id fields.
"""
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, model_validator

from app.core.ids import new_cart_item_id
from app.schemas.base import CamelModel
from app.schemas.cart import CustomDesign, CustomerPhoto

# Keys of the flattened design format the storefront SPA writes to storage
_FLAT_DESIGN_KEYS = (
    "name",
    "price",
    "image",
    "designData",
    "material",
    "size",
    "pricing",
    "specifications",
)


class _CartLine(CamelModel):
    quantity: int = Field(default=1, ge=1)
    special_request: str = ""
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    custom_photos: list[CustomerPhoto] = Field(default_factory=list)


class LocalCartItem(_CartLine):
    """
    A line added while signed out.

    Custom designs carry a `design` and are persisted to local storage;
    catalog products carry a `product_id` and live in memory only.
    """

    kind: Literal["local"] = "local"
    local_id: str = Field(alias="cartItemId")
    design: CustomDesign | None = None
    product_id: str | None = None
    name: str = ""
    price: float | None = None
    image: str = ""
    is_local: bool = True

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_design(cls, data: Any) -> Any:
        # {"isCustomDesign": true, "name": ..., "price": ...} -> {"design": {...}}
        if not isinstance(data, dict) or data.get("design") is not None:
            return data
        if not (data.get("isCustomDesign") or data.get("customDesign")):
            return data

        data = dict(data)
        nested = data.pop("customDesign", None)
        design = dict(nested) if isinstance(nested, dict) else {}
        for key in _FLAT_DESIGN_KEYS:
            if key in data and data[key] is not None:
                design.setdefault(key, data[key])
        data["design"] = design
        data.setdefault("cartItemId", new_cart_item_id("custom"))
        return data

    @classmethod
    def for_design(
        cls,
        design: CustomDesign,
        quantity: int = 1,
        special_request: str = "",
    ) -> "LocalCartItem":
        return cls(
            local_id=new_cart_item_id("custom"),
            design=design,
            name=design.name,
            price=design.price,
            image=design.image,
            quantity=quantity,
            special_request=special_request,
        )

    @classmethod
    def for_product(
        cls,
        product_id: str,
        quantity: int = 1,
        special_request: str = "",
        name: str = "",
        price: float | None = None,
        photos: list[CustomerPhoto] | None = None,
    ) -> "LocalCartItem":
        return cls(
            local_id=new_cart_item_id("temp"),
            product_id=product_id,
            name=name,
            price=price,
            quantity=quantity,
            special_request=special_request,
            custom_photos=photos or [],
        )

    @property
    def key(self) -> str:
        return self.local_id

    @property
    def is_custom_design(self) -> bool:
        return self.design is not None

    @property
    def unit_price(self) -> float:
        if self.design is not None:
            return self.design.price or 0.0
        return self.price or 0.0


class ServerCartItem(_CartLine):
    """
    A line as returned by GET /api/cart (and the other cart endpoints).

    The server copy replaces any local object it supersedes; instances
    are never converted in place.
    """

    kind: Literal["server"] = "server"
    id: str | None = None
    server_id: str = Field(alias="cartItemId")
    product_id: str | None = None
    product: dict[str, Any] | None = None
    is_custom_design: bool = False
    custom_design: CustomDesign | None = None
    name: str = ""
    price: float = 0.0
    image: str | None = None
    is_local: bool = False

    @property
    def key(self) -> str:
        return self.server_id

    @property
    def unit_price(self) -> float:
        return self.price


CartItem = Annotated[Union[LocalCartItem, ServerCartItem], Field(discriminator="kind")]

server_items_adapter = TypeAdapter(list[ServerCartItem])
