# app/client/exceptions.py


class CartClientError(Exception):
    """Base class for cart client errors."""


class CartApiError(CartClientError):
    """
    A request to the storefront API failed.

    `status_code` is None for transport-level failures (connection refused,
    timeouts) and malformed bodies on a 2xx response.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class CartItemNotFound(CartClientError):
    def __init__(self, key: str):
        super().__init__(f"Item not found in cart: {key}")
        self.key = key
