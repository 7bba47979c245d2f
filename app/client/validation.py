# app/client/validation.py
import math

from app.schemas.cart import MAX_CUSTOMER_PHOTOS, CustomDesign, CustomerPhoto

MAX_DESIGN_IMAGE_CHARS = 10_000_000


def validate_custom_design(
    design: CustomDesign | None,
    max_image_chars: int = MAX_DESIGN_IMAGE_CHARS,
) -> list[str]:
    """
    Check a custom design before it is sent to the API.

    Returns:
        Human-readable problems; an empty list means the design is valid.
    """
    if design is None:
        return ["Custom design data is required"]

    errors: list[str] = []

    if not design.name or not design.name.strip():
        errors.append("Product name is required")

    if design.price is None or not math.isfinite(design.price) or design.price <= 0:
        errors.append("Valid price is required")

    if not design.image or not design.image.startswith("data:image/"):
        errors.append("Valid image data is required")

    if design.image and len(design.image) > max_image_chars:
        errors.append("Image size too large")

    return errors


def validate_customer_photos(photos: list[CustomerPhoto]) -> list[str]:
    """Check photos attached to a catalog-product add."""
    if len(photos) > MAX_CUSTOMER_PHOTOS:
        return [f"Maximum {MAX_CUSTOMER_PHOTOS} photos allowed"]
    return [
        f"Photo {i} is not a valid image"
        for i, photo in enumerate(photos, start=1)
        if not photo.has_valid_image
    ]
