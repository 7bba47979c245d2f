"""Test data shared by API and client tests."""

import json
import uuid

import httpx

PNG_DATA_URL = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
)


def design_payload(**overrides):
    """camelCase custom design body as the storefront sends it."""
    payload = {
        "name": "Custom Mug",
        "price": 299,
        "image": PNG_DATA_URL,
        "designData": '{"shapes": []}',
    }
    payload.update(overrides)
    return payload


class FakeCartServer:
    """
    Scripted stand-in for the cart API, served through httpx.MockTransport.

    Knobs:
      - fail_add_names: custom design names answered with 500
      - fail_fetch: GET /api/cart raises a connection error
      - fail_wishlist: GET /api/wishlist answers 500
      - remove_status: status code forced on /api/cart/remove
    """

    def __init__(self):
        self.items: list[dict] = []
        self.wishlist: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.fail_add_names: set[str] = set()
        self.fail_fetch = False
        self.fail_wishlist = False
        self.remove_status: int | None = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def server_line(self, name="Custom Mug", price=299.0, quantity=1, **extra):
        line = {
            "id": str(uuid.uuid4()),
            "cartItemId": f"custom_{len(self.items) + 1}",
            "isCustomDesign": True,
            "name": name,
            "price": price,
            "image": PNG_DATA_URL,
            "quantity": quantity,
            "specialRequest": "",
            "addedAt": "2026-10-01T10:00:00+00:00",
            "isLocal": False,
        }
        line.update(extra)
        return line

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        body = json.loads(request.content) if request.content else {}

        if request.method == "GET" and path == "/api/cart":
            if self.fail_fetch:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"items": self.items})

        if request.method == "GET" and path == "/api/wishlist":
            if self.fail_wishlist:
                return httpx.Response(500, json={"detail": "wishlist unavailable"})
            return httpx.Response(
                200, json={"success": True, "wishlist": {"products": self.wishlist}}
            )

        if path == "/api/cart/add":
            design = body.get("customDesign")
            if design is None:
                line = self.server_line(
                    name="Catalog item",
                    isCustomDesign=False,
                    productId=body["productId"],
                    quantity=body["quantity"],
                    customPhotos=body.get("customPhotos", []),
                )
            elif design["name"] in self.fail_add_names:
                return httpx.Response(500, json={"detail": "database unavailable"})
            else:
                line = self.server_line(
                    name=design["name"],
                    price=design["price"],
                    quantity=body["quantity"],
                    customDesign=design,
                    specialRequest=body["specialRequest"],
                )
            self.items.append(line)
            return httpx.Response(200, json={"items": self.items})

        if path == "/api/cart/update":
            for line in self.items:
                if line["cartItemId"] == body.get("cartItemId"):
                    line["quantity"] = body["quantity"]
                    return httpx.Response(200, json={"items": self.items})
            return httpx.Response(404, json={"detail": "Item not found in cart"})

        if path == "/api/cart/remove":
            if self.remove_status is not None:
                return httpx.Response(self.remove_status, json={"detail": "forced"})
            before = len(self.items)
            self.items = [i for i in self.items if i["cartItemId"] != body.get("cartItemId")]
            if len(self.items) == before:
                return httpx.Response(404, json={"detail": "Item not found in cart"})
            return httpx.Response(200, json={"items": self.items})

        if path == "/api/cart/clear":
            self.items = []
            return httpx.Response(200, json={"items": []})

        if path in ("/api/wishlist/add", "/api/wishlist/remove"):
            pid = body["productId"]
            self.wishlist = [p for p in self.wishlist if p["id"] != pid]
            if path.endswith("add"):
                self.wishlist.append({"id": pid, "name": "Resin Frame"})
            return httpx.Response(
                200, json={"success": True, "wishlist": {"products": self.wishlist}}
            )

        return httpx.Response(404, json={"detail": "Not Found"})
