# app/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.product import ProductRead


# ---- custom design document ----


class Material(CamelModel):
    type: str = "resin"
    name: str = "Resin"
    description: str = "High-quality resin"
    multiplier: float = 1


class SizeOption(CamelModel):
    value: str = "4"
    name: str = "4 inch"
    multiplier: float = 1


class Pricing(CamelModel):
    """
    Price breakdown of a custom design.

    `final_price` defaults to the design's own price when omitted.
    """

    base_price: float = 299
    material_multiplier: float = 1
    size_multiplier: float = 1
    final_price: float | None = None


class Specifications(CamelModel):
    material: str = ""
    size: str = ""
    customization: str = "Hand-crafted based on your design"
    processing: str = "3-5 business days"


class CustomDesign(CamelModel):
    """
    User-authored design (canvas snapshot + material + size).

    Every field has a default so drafts can be held client-side.
    validate_custom_design() on the client and CartService on the server
    reject incomplete designs.
    """

    name: str = ""
    price: float | None = None
    image: str = ""
    design_data: str = ""
    material: Material = Field(default_factory=Material)
    size: SizeOption = Field(default_factory=SizeOption)
    pricing: Pricing = Field(default_factory=Pricing)
    specifications: Specifications = Field(default_factory=Specifications)


# ---- customer photos ----

MAX_CUSTOMER_PHOTOS = 10


class CustomerPhoto(CamelModel):
    """
    A photo the customer attaches to a catalog-product line, e.g. the
    picture to be set into a pressed-flower frame.

    `image` is a full URL or an embedded `data:image/...` payload.
    """

    id: str | None = None
    image: str
    preview: str | None = None
    file_path: str | None = None
    name: str = ""
    size: int | None = None
    type: str = ""
    order: int = 1
    uploaded_at: datetime | None = None

    @property
    def has_valid_image(self) -> bool:
        return self.image.startswith(("data:image/", "http://", "https://"))


# ---- requests ----


class CartAddRequest(CamelModel):
    """
    Payload for POST /cart/add.

    Either `product_id` (catalog product) or `custom_design` must be set.
    """

    product_id: uuid.UUID | None = None
    quantity: int = Field(default=1, ge=1)
    special_request: str = Field(default="", max_length=500)
    custom_design: CustomDesign | None = None
    custom_photos: list[CustomerPhoto] = Field(default_factory=list)
    # single-photo form sent by older storefront builds
    custom_photo: CustomerPhoto | None = None

    def photos(self) -> list[CustomerPhoto]:
        """Attached photos, folding the single-photo form into the list."""
        if self.custom_photos:
            return list(self.custom_photos)
        if self.custom_photo is not None:
            return [self.custom_photo.model_copy(update={"order": 1})]
        return []


class CartUpdateRequest(CamelModel):
    """
    Payload for POST /cart/update.

    Lines are addressed by `cart_item_id`, or by `product_id` for
    catalog products.
    """

    product_id: str | None = None
    cart_item_id: str | None = None
    quantity: int
    is_custom: bool = False


class CartRemoveRequest(CamelModel):
    product_id: str | None = None
    cart_item_id: str | None = None
    is_custom: bool = False


# ---- responses ----


class CartItemRead(CamelModel):
    """
    Read model for a single cart line.

    Custom designs are flattened (`name`, `price`, `image`) so clients can
    render both kinds of lines the same way.
    """

    id: uuid.UUID
    cart_item_id: str
    product_id: uuid.UUID | None = None
    product: ProductRead | None = None
    is_custom_design: bool
    custom_design: CustomDesign | None = None
    custom_photos: list[CustomerPhoto] = Field(default_factory=list)
    name: str
    price: float
    image: str | None = None
    quantity: int
    special_request: str
    line_total: float
    added_at: datetime
    is_local: bool = False


class CartResponse(CamelModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int = 0
    total_price: float = 0.0
