"""
API Tests: /api/cart

Covers:
- auth rules (guest 401, admin 403)
- custom design adds (defaults, validation)
- catalog product adds (merge, stock, inactive/unknown products)
- customer photos on catalog-product lines
- update / remove addressed by cartItemId or productId
- clear and per-user isolation
"""

import logging
import uuid

import pytest

from app.core.auth import create_access_token
from helpers import PNG_DATA_URL, design_payload


def add_design(client, headers, **overrides):
    body = {
        "quantity": overrides.pop("quantity", 1),
        "specialRequest": overrides.pop("specialRequest", ""),
        "customDesign": design_payload(**overrides),
    }
    return client.post("/api/cart/add", json=body, headers=headers)


class TestCartAuth:

    def test_guest_is_rejected(self, client):
        assert client.get("/api/cart").status_code == 401

    def test_invalid_token_is_rejected(self, client):
        res = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})
        assert res.status_code == 401

    def test_admin_is_forbidden(self, client, admin_headers):
        assert client.get("/api/cart", headers=admin_headers).status_code == 403

    def test_new_customer_gets_empty_cart(self, client, customer_headers):
        res = client.get("/api/cart", headers=customer_headers)

        assert res.status_code == 200
        assert res.json() == {"items": [], "totalQuantity": 0, "totalPrice": 0.0}


class TestAddCustomDesign:

    def test_add_fills_defaults(self, client, customer_headers):
        res = add_design(client, customer_headers, quantity=2, specialRequest="Gold flakes")

        assert res.status_code == 200
        body = res.json()
        [item] = body["items"]
        assert item["isCustomDesign"] is True
        assert item["cartItemId"].startswith("custom_")
        assert item["name"] == "Custom Mug"
        assert item["price"] == 299
        assert item["quantity"] == 2
        assert item["specialRequest"] == "Gold flakes"
        assert item["isLocal"] is False
        assert item["productId"] is None

        design = item["customDesign"]
        assert design["material"]["name"] == "Resin"
        assert design["size"]["name"] == "4 inch"
        assert design["pricing"]["basePrice"] == 299
        assert design["pricing"]["finalPrice"] == 299
        assert design["specifications"]["material"] == "Resin"
        assert design["specifications"]["processing"] == "3-5 business days"

        assert body["totalQuantity"] == 2
        assert body["totalPrice"] == 598

    def test_add_is_logged(self, client, customer_headers, caplog):
        caplog.set_level(logging.INFO, logger="app.services.cart_service")

        add_design(client, customer_headers, name="Ocean Coaster")

        assert any(
            r.getMessage().startswith("Custom design 'Ocean Coaster' added to cart of ")
            for r in caplog.records
        )

    def test_each_add_creates_a_new_line(self, client, customer_headers):
        add_design(client, customer_headers)
        res = add_design(client, customer_headers)

        items = res.json()["items"]
        assert len(items) == 2
        assert items[0]["cartItemId"] != items[1]["cartItemId"]

    def test_specifications_follow_chosen_material(self, client, customer_headers):
        res = add_design(
            client,
            customer_headers,
            material={"type": "wood", "name": "Teak Wood", "multiplier": 1.5},
        )

        design = res.json()["items"][0]["customDesign"]
        assert design["specifications"]["material"] == "Teak Wood"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": ""},
            {"name": "   "},
            {"price": None},
            {"price": 0},
            {"price": -5},
        ],
    )
    def test_name_and_price_are_required(self, client, customer_headers, overrides):
        res = add_design(client, customer_headers, **overrides)

        assert res.status_code == 400
        assert res.json()["detail"] == "Custom design must have name and price"

    @pytest.mark.parametrize("raw_price", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_price_is_rejected(self, client, customer_headers, raw_price):
        # literal NaN / Infinity tokens, which httpx will not encode
        body = (
            '{"quantity": 1, "customDesign": {"name": "Custom Mug", '
            f'"price": {raw_price}, "image": "{PNG_DATA_URL}"}}}}'
        )
        res = client.post(
            "/api/cart/add",
            content=body,
            headers={**customer_headers, "Content-Type": "application/json"},
        )

        assert res.status_code == 400
        assert res.json()["detail"] == "Custom design must have name and price"
        assert client.get("/api/cart", headers=customer_headers).json()["items"] == []

    def test_image_must_be_embedded(self, client, customer_headers):
        res = add_design(client, customer_headers, image="https://cdn.example.com/mug.png")

        assert res.status_code == 400
        assert res.json()["detail"] == "Custom design must have valid image data"

    def test_quantity_must_be_positive(self, client, customer_headers):
        res = add_design(client, customer_headers, quantity=0)
        assert res.status_code == 422


class TestAddProduct:

    def test_add_snapshots_price(self, client, customer_headers, product):
        res = client.post(
            "/api/cart/add",
            json={"productId": str(product.id), "quantity": 2},
            headers=customer_headers,
        )

        assert res.status_code == 200
        [item] = res.json()["items"]
        assert item["isCustomDesign"] is False
        assert item["productId"] == str(product.id)
        assert item["product"]["name"] == product.name
        assert item["price"] == product.price
        assert item["lineTotal"] == product.price * 2

    def test_same_product_is_merged(self, client, customer_headers, product):
        for qty in (1, 2):
            res = client.post(
                "/api/cart/add",
                json={"productId": str(product.id), "quantity": qty, "specialRequest": "Gift wrap"},
                headers=customer_headers,
            )

        [item] = res.json()["items"]
        assert item["quantity"] == 3
        assert item["specialRequest"] == "Gift wrap"

    def test_stock_is_enforced(self, client, customer_headers, make_product):
        product = make_product(stock_on_hand=2)

        res = client.post(
            "/api/cart/add",
            json={"productId": str(product.id), "quantity": 3},
            headers=customer_headers,
        )

        assert res.status_code == 400
        assert res.json()["detail"] == "Not enough stock available"

    def test_inactive_product(self, client, customer_headers, make_product):
        product = make_product(is_active=False)

        res = client.post(
            "/api/cart/add", json={"productId": str(product.id)}, headers=customer_headers
        )

        assert res.status_code == 400

    def test_unknown_product(self, client, customer_headers):
        res = client.post(
            "/api/cart/add", json={"productId": str(uuid.uuid4())}, headers=customer_headers
        )
        assert res.status_code == 404

    def test_product_or_design_required(self, client, customer_headers):
        res = client.post("/api/cart/add", json={"quantity": 1}, headers=customer_headers)

        assert res.status_code == 400
        assert res.json()["detail"] == "Product ID is required for regular products"


class TestCustomerPhotos:

    def add_with_photos(self, client, headers, product, **body):
        return client.post(
            "/api/cart/add",
            json={"productId": str(product.id), "quantity": 1, **body},
            headers=headers,
        )

    def test_photos_are_stored_in_order(self, client, customer_headers, product):
        photos = [
            {"id": "b", "image": "https://cdn.example.com/b.jpg", "order": 2},
            {"id": "a", "image": PNG_DATA_URL, "name": "grandma.png", "order": 1},
        ]

        res = self.add_with_photos(client, customer_headers, product, customPhotos=photos)

        assert res.status_code == 200
        [item] = res.json()["items"]
        assert [p["id"] for p in item["customPhotos"]] == ["a", "b"]
        assert item["customPhotos"][0]["name"] == "grandma.png"

    def test_single_photo_form(self, client, customer_headers, product):
        res = self.add_with_photos(
            client,
            customer_headers,
            product,
            customPhoto={"image": "https://cdn.example.com/one.jpg", "order": 4},
        )

        [photo] = res.json()["items"][0]["customPhotos"]
        assert photo["image"] == "https://cdn.example.com/one.jpg"
        assert photo["order"] == 1

    def test_readd_replaces_photos(self, client, customer_headers, product):
        self.add_with_photos(
            client, customer_headers, product,
            customPhotos=[{"image": "https://cdn.example.com/old.jpg"}],
        )
        res = self.add_with_photos(
            client, customer_headers, product,
            customPhotos=[{"image": "https://cdn.example.com/new.jpg"}],
        )

        [item] = res.json()["items"]
        assert item["quantity"] == 2
        assert [p["image"] for p in item["customPhotos"]] == ["https://cdn.example.com/new.jpg"]

    def test_readd_without_photos_keeps_them(self, client, customer_headers, product):
        self.add_with_photos(
            client, customer_headers, product,
            customPhotos=[{"image": "https://cdn.example.com/old.jpg"}],
        )
        res = self.add_with_photos(client, customer_headers, product)

        assert len(res.json()["items"][0]["customPhotos"]) == 1

    def test_too_many_photos(self, client, customer_headers, product):
        photos = [{"image": PNG_DATA_URL, "order": i} for i in range(11)]

        res = self.add_with_photos(client, customer_headers, product, customPhotos=photos)

        assert res.status_code == 400
        assert res.json()["detail"] == "Maximum 10 photos allowed"

    def test_photo_must_be_an_image(self, client, customer_headers, product):
        photos = [{"image": PNG_DATA_URL}, {"image": "C:\\photos\\me.jpg"}]

        res = self.add_with_photos(client, customer_headers, product, customPhotos=photos)

        assert res.status_code == 400
        assert res.json()["detail"] == "Photo 2 is not a valid image"
        assert client.get("/api/cart", headers=customer_headers).json()["items"] == []


class TestUpdateAndRemove:

    def test_update_custom_line_by_cart_item_id(self, client, customer_headers):
        line = add_design(client, customer_headers).json()["items"][0]

        res = client.post(
            "/api/cart/update",
            json={"cartItemId": line["cartItemId"], "quantity": 4, "isCustom": True},
            headers=customer_headers,
        )

        assert res.status_code == 200
        assert res.json()["items"][0]["quantity"] == 4

    def test_update_product_line_by_product_id(self, client, customer_headers, product):
        client.post("/api/cart/add", json={"productId": str(product.id)}, headers=customer_headers)

        res = client.post(
            "/api/cart/update",
            json={"productId": str(product.id), "quantity": 5},
            headers=customer_headers,
        )

        assert res.status_code == 200
        assert res.json()["items"][0]["quantity"] == 5

    def test_update_below_one_is_rejected(self, client, customer_headers):
        line = add_design(client, customer_headers).json()["items"][0]

        res = client.post(
            "/api/cart/update",
            json={"cartItemId": line["cartItemId"], "quantity": 0},
            headers=customer_headers,
        )

        assert res.status_code == 400

    def test_update_beyond_stock(self, client, customer_headers, make_product):
        product = make_product(stock_on_hand=3)
        client.post("/api/cart/add", json={"productId": str(product.id)}, headers=customer_headers)

        res = client.post(
            "/api/cart/update",
            json={"productId": str(product.id), "quantity": 4},
            headers=customer_headers,
        )

        assert res.status_code == 400

    def test_update_missing_line(self, client, customer_headers):
        res = client.post(
            "/api/cart/update",
            json={"cartItemId": "custom_404", "quantity": 2},
            headers=customer_headers,
        )
        assert res.status_code == 404

    def test_remove_by_cart_item_id(self, client, customer_headers, product):
        client.post("/api/cart/add", json={"productId": str(product.id)}, headers=customer_headers)
        line = add_design(client, customer_headers).json()["items"][1]

        res = client.post(
            "/api/cart/remove",
            json={"cartItemId": line["cartItemId"], "isCustom": True},
            headers=customer_headers,
        )

        assert res.status_code == 200
        [remaining] = res.json()["items"]
        assert remaining["productId"] == str(product.id)

    def test_remove_custom_line_by_row_id(self, client, customer_headers):
        line = add_design(client, customer_headers).json()["items"][0]

        res = client.post(
            "/api/cart/remove",
            json={"productId": line["id"], "isCustom": True},
            headers=customer_headers,
        )

        assert res.status_code == 200
        assert res.json()["items"] == []

    def test_remove_product_line_by_product_id(self, client, customer_headers, product):
        client.post("/api/cart/add", json={"productId": str(product.id)}, headers=customer_headers)

        res = client.post(
            "/api/cart/remove", json={"productId": str(product.id)}, headers=customer_headers
        )

        assert res.status_code == 200
        assert res.json()["items"] == []

    def test_remove_missing_line(self, client, customer_headers):
        res = client.post(
            "/api/cart/remove", json={"cartItemId": "custom_404"}, headers=customer_headers
        )
        assert res.status_code == 404

    def test_remove_needs_an_identifier(self, client, customer_headers):
        res = client.post("/api/cart/remove", json={}, headers=customer_headers)

        assert res.status_code == 400
        assert res.json()["detail"] == "Product ID or Cart Item ID is required"

    def test_remove_with_malformed_product_id(self, client, customer_headers):
        res = client.post(
            "/api/cart/remove", json={"productId": "abc"}, headers=customer_headers
        )

        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid product ID format"


class TestClearAndIsolation:

    def test_clear(self, client, customer_headers, product):
        add_design(client, customer_headers)
        client.post("/api/cart/add", json={"productId": str(product.id)}, headers=customer_headers)

        res = client.post("/api/cart/clear", headers=customer_headers)

        assert res.status_code == 200
        assert res.json()["items"] == []
        assert client.get("/api/cart", headers=customer_headers).json()["items"] == []

    def test_carts_are_per_user(self, client, customer_headers):
        line = add_design(client, customer_headers).json()["items"][0]
        other = {"Authorization": f"Bearer {create_access_token(uuid.uuid4(), 'ravi@example.com')}"}

        assert client.get("/api/cart", headers=other).json()["items"] == []
        res = client.post(
            "/api/cart/remove", json={"cartItemId": line["cartItemId"]}, headers=other
        )
        assert res.status_code == 404
