# app/client/api.py
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.client.exceptions import CartApiError
from app.client.items import ServerCartItem, server_items_adapter
from app.schemas.cart import CustomDesign, CustomerPhoto

logger = logging.getLogger(__name__)


class CartApiClient:
    """
    Async HTTP client for the cart and wishlist endpoints.

    The bearer token is treated as an opaque credential and attached to
    every request while set. Every failure (transport error, non-2xx
    status, malformed body) is raised as CartApiError.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport)

    async def __aenter__(self) -> "CartApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- internal helpers ----

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method, path, json=json, headers=self._headers()
            )
        except httpx.HTTPError as e:
            raise CartApiError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            raise CartApiError(
                f"Server error: {response.status_code} - {_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CartApiError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _items(body: Any) -> list[ServerCartItem]:
        if not isinstance(body, dict):
            raise CartApiError("Cart response is not an object")
        try:
            return server_items_adapter.validate_python(body.get("items") or [])
        except ValidationError as e:
            raise CartApiError(f"Malformed cart items: {e}") from e

    @staticmethod
    def _wishlist_products(body: Any) -> list[dict[str, Any]]:
        if not isinstance(body, dict):
            raise CartApiError("Wishlist response is not an object")
        wishlist = body.get("wishlist") or {}
        return list(wishlist.get("products") or [])

    # ---- cart ----

    async def fetch_cart(self) -> list[ServerCartItem]:
        return self._items(await self._request("GET", "/api/cart"))

    async def add_custom_design(
        self,
        design: CustomDesign,
        quantity: int = 1,
        special_request: str = "",
    ) -> list[ServerCartItem]:
        payload = {
            "quantity": quantity,
            "specialRequest": special_request,
            "customDesign": design.model_dump(mode="json", by_alias=True),
        }
        return self._items(await self._request("POST", "/api/cart/add", payload))

    async def add_product(
        self,
        product_id: str,
        quantity: int = 1,
        special_request: str = "",
        photos: list[CustomerPhoto] | None = None,
    ) -> list[ServerCartItem]:
        payload = {
            "productId": product_id,
            "quantity": quantity,
            "specialRequest": special_request,
        }
        if photos:
            payload["customPhotos"] = [
                p.model_dump(mode="json", by_alias=True, exclude_none=True)
                for p in photos
            ]
        return self._items(await self._request("POST", "/api/cart/add", payload))

    async def update_item(
        self, item: ServerCartItem, quantity: int
    ) -> list[ServerCartItem]:
        payload = {
            "productId": item.product_id,
            "cartItemId": item.server_id,
            "quantity": quantity,
            "isCustom": item.is_custom_design,
        }
        return self._items(await self._request("POST", "/api/cart/update", payload))

    async def remove_item(self, item: ServerCartItem) -> list[ServerCartItem]:
        payload = {
            "productId": item.product_id,
            "cartItemId": item.server_id,
            "isCustom": item.is_custom_design,
        }
        return self._items(await self._request("POST", "/api/cart/remove", payload))

    async def clear_cart(self) -> None:
        await self._request("POST", "/api/cart/clear")

    # ---- wishlist ----

    async def fetch_wishlist(self) -> list[dict[str, Any]]:
        return self._wishlist_products(await self._request("GET", "/api/wishlist"))

    async def add_to_wishlist(self, product_id: str) -> list[dict[str, Any]]:
        body = await self._request("POST", "/api/wishlist/add", {"productId": product_id})
        return self._wishlist_products(body)

    async def remove_from_wishlist(self, product_id: str) -> list[dict[str, Any]]:
        body = await self._request(
            "POST", "/api/wishlist/remove", {"productId": product_id}
        )
        return self._wishlist_products(body)


def _error_detail(response: httpx.Response) -> str:
    """FastAPI puts the message in `detail`; fall back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("message") or body)
    return str(body)
