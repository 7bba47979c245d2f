# app/client/store.py
import logging
from typing import Any

from app.client.api import CartApiClient
from app.client.config import ClientSettings, get_client_settings
from app.client.exceptions import CartApiError, CartItemNotFound
from app.client.items import CartItem, LocalCartItem
from app.client.storage import LocalCartStorage, LocalStorage
from app.client.sync import SyncReport, local_custom_items, sync_local_custom_designs
from app.client.validation import (
    MAX_DESIGN_IMAGE_CHARS,
    validate_custom_design,
    validate_customer_photos,
)
from app.schemas.cart import CustomDesign, CustomerPhoto

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to load cart data"


class CartStore:
    """
    Holder of the storefront cart state.

    Constructed once at start-up and handed to whatever needs the cart.
    It owns:
      - `items`: the in-memory cart (local and server lines)
      - `wishlist`: products returned by the wishlist endpoints
      - the local storage slot for signed-out custom designs
      - `loading` / `error` flags for the UI

    API failures never escape public methods; they end up in `error`.
    """

    def __init__(
        self,
        api: CartApiClient,
        storage: LocalCartStorage,
        max_image_chars: int = MAX_DESIGN_IMAGE_CHARS,
    ):
        self.api = api
        self.storage = storage
        self.max_image_chars = max_image_chars

        self.items: list[CartItem] = []
        self.wishlist: list[dict[str, Any]] = []
        self.loading = False
        self.error: str | None = None
        self.last_sync: SyncReport | None = None

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        token: str | None = None,
    ) -> "CartStore":
        """Build a store wired to the API and local storage named in settings."""
        settings = settings or get_client_settings()
        return cls(
            CartApiClient(settings.API_BASE_URL, token=token),
            LocalCartStorage(
                LocalStorage(settings.CART_STORAGE_PATH), settings.CART_STORAGE_KEY
            ),
            settings.MAX_DESIGN_IMAGE_CHARS,
        )

    # ---- token / lifecycle ----

    @property
    def token(self) -> str | None:
        return self.api.token

    def load(self) -> None:
        """Restore signed-out custom designs from local storage."""
        stored = self.storage.load()
        if stored:
            self.items = list(stored)

    async def set_token(self, token: str | None) -> SyncReport | None:
        """
        React to a change of authentication state.

        A new token triggers reconciliation; losing the token keeps only
        the local custom designs and forgets the wishlist.
        """
        previous = self.api.token
        self.api.token = token or None

        if not token:
            self.items = self._local_designs()
            self.wishlist = []
            logger.info(f"Keeping {len(self.items)} local items after logout")
            return None

        if token == previous:
            return None
        return await self.reconcile()

    async def reconcile(self) -> SyncReport:
        """
        Upload local custom designs, then replace the in-memory cart with
        the server's.

        - Local catalog-product lines do not take part and are superseded
          by the server cart.
        - If the cart fetch fails, `items` is left exactly as it was and
          `error` is set.
        - A failed wishlist fetch is logged and ignored.
        """
        self.loading = True
        self.error = None
        try:
            report = await sync_local_custom_designs(
                self.api,
                self.storage,
                self._local_designs(),
                self.max_image_chars,
            )
            self.last_sync = report

            try:
                server_items = await self.api.fetch_cart()
            except CartApiError as e:
                logger.error(f"Error fetching cart: {e}")
                report.fetch_error = str(e)
                self.error = FETCH_FAILED_MESSAGE
                return report

            try:
                self.wishlist = await self.api.fetch_wishlist()
            except CartApiError as e:
                logger.warning(f"Failed to fetch wishlist, continuing with cart: {e}")
                report.wishlist_error = str(e)

            self.items = list(server_items)
            logger.info(f"Fetched {len(server_items)} items from server")
            return report
        finally:
            self.loading = False

    # ---- lookup ----

    def find(self, key: str) -> CartItem | None:
        for item in self.items:
            if item.key == key:
                return item
        return None

    def _resolve(self, item_or_key: CartItem | str) -> CartItem:
        key = item_or_key if isinstance(item_or_key, str) else item_or_key.key
        item = self.find(key)
        if item is None:
            raise CartItemNotFound(key)
        return item

    def _persist_local(self, dropped: str | None = None) -> None:
        # Merge with the slot so designs left over from a failed sync survive
        self.storage.save([it for it in self._local_designs() if it.key != dropped])

    def _local_designs(self) -> list[LocalCartItem]:
        """
        Local custom designs from the storage slot and from memory, by key.

        Designs that failed an earlier sync live only in the slot once the
        server cart has replaced memory; the in-memory copy wins otherwise.
        """
        merged = {it.key: it for it in local_custom_items(self.storage.load())}
        for item in local_custom_items(self.items):
            merged[item.key] = item
        return list(merged.values())

    # ---- adding ----

    async def add_custom_design(
        self,
        design: CustomDesign,
        quantity: int = 1,
        special_request: str = "",
    ) -> bool:
        """
        Add a custom design: uploaded right away when signed in, kept in
        local storage otherwise.
        """
        errors = validate_custom_design(design, self.max_image_chars)
        if errors:
            self.error = f"Failed to add item to cart: Validation failed: {', '.join(errors)}"
            return False

        if not self.token:
            self.items.append(
                LocalCartItem.for_design(design, quantity, special_request)
            )
            self._persist_local()
            logger.info("Custom design stored locally")
            return True

        return await self._replace_from_server(
            self.api.add_custom_design(design, quantity, special_request),
            "Failed to add item to cart",
        )

    async def add_product(
        self,
        product_id: str,
        quantity: int = 1,
        special_request: str = "",
        name: str = "",
        price: float | None = None,
        photos: list[CustomerPhoto] | None = None,
    ) -> bool:
        """
        Add a catalog product, optionally with customer photos attached.
        Signed-out adds are kept in memory only and are not uploaded on
        sign-in.
        """
        photos = photos or []
        errors = validate_customer_photos(photos)
        if errors:
            self.error = f"Failed to add item to cart: Validation failed: {', '.join(errors)}"
            return False

        if not self.token:
            self.items.append(
                LocalCartItem.for_product(
                    product_id, quantity, special_request, name, price, photos
                )
            )
            return True

        return await self._replace_from_server(
            self.api.add_product(product_id, quantity, special_request, photos),
            "Failed to add item to cart",
        )

    async def _replace_from_server(self, call, failure_message: str) -> bool:
        self.loading = True
        self.error = None
        try:
            self.items = list(await call)
            return True
        except CartApiError as e:
            logger.error(f"{failure_message}: {e}")
            self.error = f"{failure_message}: {e.message}"
            return False
        finally:
            self.loading = False

    # ---- changing / removing ----

    async def remove(self, item_or_key: CartItem | str) -> bool:
        """
        Remove a line.

        Local lines go away immediately. Server lines are only dropped once
        the server confirms (or answers 404); other failures keep the line
        and set `error`.
        """
        try:
            item = self._resolve(item_or_key)
        except CartItemNotFound:
            self.error = "Item not found in cart"
            return False

        if isinstance(item, LocalCartItem) or not self.token:
            self.items = [it for it in self.items if it.key != item.key]
            self._persist_local(item.key)
            return True

        self.loading = True
        self.error = None
        try:
            self.items = list(await self.api.remove_item(item))
            return True
        except CartApiError as e:
            if e.is_not_found:
                logger.info(f"Server has no line {item.key}, dropping it locally")
                self.items = [it for it in self.items if it.key != item.key]
                return True
            logger.error(f"Server removal failed, keeping item in cart: {e}")
            self.error = f"Failed to remove item: {e.message}"
            return False
        finally:
            self.loading = False

    async def update_quantity(self, item_or_key: CartItem | str, quantity: int) -> bool:
        """
        Set a line's quantity; zero or less removes the line.
        """
        if quantity <= 0:
            return await self.remove(item_or_key)

        try:
            item = self._resolve(item_or_key)
        except CartItemNotFound:
            self.error = "Item not found in cart"
            return False

        if isinstance(item, LocalCartItem) or not self.token:
            self.items = [
                it.model_copy(update={"quantity": quantity}) if it.key == item.key else it
                for it in self.items
            ]
            self._persist_local()
            return True

        return await self._replace_from_server(
            self.api.update_item(item, quantity),
            "Failed to update quantity",
        )

    async def clear(self) -> None:
        """
        Empty the cart everywhere. A failed server clear is logged and the
        local state is cleared anyway.
        """
        self.loading = True
        self.error = None
        try:
            if self.token:
                try:
                    await self.api.clear_cart()
                except CartApiError as e:
                    logger.warning(f"Failed to clear server cart, continuing with local clear: {e}")
            self.items = []
            self.storage.clear()
        finally:
            self.loading = False

    # ---- wishlist ----

    async def add_to_wishlist(self, product_id: str) -> bool:
        if not self.token:
            self.error = "Please login to add items to wishlist"
            return False
        return await self._replace_wishlist(
            self.api.add_to_wishlist(product_id), "Failed to add to wishlist"
        )

    async def remove_from_wishlist(self, product_id: str) -> bool:
        if not self.token:
            self.error = "Please login to manage wishlist"
            return False
        return await self._replace_wishlist(
            self.api.remove_from_wishlist(product_id), "Failed to remove from wishlist"
        )

    async def _replace_wishlist(self, call, failure_message: str) -> bool:
        self.loading = True
        self.error = None
        try:
            self.wishlist = await call
            return True
        except CartApiError as e:
            logger.error(f"{failure_message}: {e}")
            self.error = f"{failure_message}: {e.message}"
            return False
        finally:
            self.loading = False

    def is_in_wishlist(self, product_id: str) -> bool:
        return any(str(p.get("id")) == product_id for p in self.wishlist)

    async def move_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        """Add a wishlist product to the cart, then drop it from the wishlist."""
        if not await self.add_product(product_id, quantity):
            return False
        return await self.remove_from_wishlist(product_id)

    # ---- totals ----

    @property
    def total(self) -> float:
        return sum(it.unit_price * it.quantity for it in self.items)

    @property
    def count(self) -> int:
        return sum(it.quantity for it in self.items)
