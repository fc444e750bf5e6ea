"""Tests for the cart endpoints."""

import uuid


class TestCartAuth:
    def test_guest_rejected(self, client):
        response = client.get("/api/v1/cart")
        assert response.status_code == 401

    def test_bad_token_rejected(self, client):
        response = client.get("/api/v1/cart", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestCartOperations:
    def test_empty_cart(self, client, shopper_headers):
        response = client.get("/api/v1/cart", headers=shopper_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total_quantity"] == 0
        assert data["subtotal"] == 0

    def test_add_item(self, client, shopper_headers, make_product):
        product = make_product(price="500")

        response = client.post(
            "/api/v1/cart",
            json={"product_id": str(product.id), "quantity": 2},
            headers=shopper_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 1
        item = data["items"][0]
        assert item["product_title"] == "Embroidered Kurta"
        assert item["quantity"] == 2
        assert item["line_total"] == 1000
        assert data["subtotal"] == 1000

    def test_readding_increments_quantity(self, client, shopper_headers, make_product, fill_cart):
        product = make_product()
        fill_cart((product, 1), (product, 2))

        data = client.get("/api/v1/cart", headers=shopper_headers).json()
        assert len(data["items"]) == 1
        assert data["items"][0]["quantity"] == 3

    def test_variants_are_separate_lines(self, client, shopper_headers, make_product):
        product = make_product()
        for variant in ("S", "M", "S"):
            client.post(
                "/api/v1/cart",
                json={"product_id": str(product.id), "variant": variant},
                headers=shopper_headers,
            )

        data = client.get("/api/v1/cart", headers=shopper_headers).json()
        quantities = {item["variant"]: item["quantity"] for item in data["items"]}
        assert quantities == {"S": 2, "M": 1}
        assert data["total_quantity"] == 3

    def test_update_quantity(self, client, shopper_headers, make_product, fill_cart):
        product = make_product(price="250")
        fill_cart((product, 1))

        response = client.patch(
            f"/api/v1/cart/{product.id}", json={"quantity": 4}, headers=shopper_headers
        )

        assert response.status_code == 200
        assert response.json()["subtotal"] == 1000

    def test_update_to_zero_removes(self, client, shopper_headers, make_product, fill_cart):
        product = make_product()
        fill_cart((product, 3))

        response = client.patch(
            f"/api/v1/cart/{product.id}", json={"quantity": 0}, headers=shopper_headers
        )

        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_negative_quantity_rejected(self, client, shopper_headers, make_product, fill_cart):
        product = make_product()
        fill_cart((product, 1))

        response = client.patch(
            f"/api/v1/cart/{product.id}", json={"quantity": -1}, headers=shopper_headers
        )
        assert response.status_code == 422

    def test_update_missing_item(self, client, shopper_headers):
        response = client.patch(
            f"/api/v1/cart/{uuid.uuid4()}", json={"quantity": 1}, headers=shopper_headers
        )
        assert response.status_code == 404

    def test_remove_item(self, client, shopper_headers, make_product, fill_cart):
        kurta = make_product()
        dupatta = make_product(title="Chiffon Dupatta", price="300")
        fill_cart((kurta, 1), (dupatta, 1))

        response = client.delete(f"/api/v1/cart/{kurta.id}", headers=shopper_headers)

        assert response.status_code == 200
        titles = [item["product_title"] for item in response.json()["items"]]
        assert titles == ["Chiffon Dupatta"]

    def test_clear(self, client, shopper_headers, make_product, fill_cart):
        fill_cart((make_product(), 2))

        response = client.delete("/api/v1/cart", headers=shopper_headers)

        assert response.status_code == 200
        assert response.json()["items"] == []
        assert client.get("/api/v1/cart", headers=shopper_headers).json()["items"] == []

    def test_unavailable_product_rejected(self, client, shopper_headers, make_product):
        product = make_product(available=False)

        response = client.post(
            "/api/v1/cart",
            json={"product_id": str(product.id), "quantity": 1},
            headers=shopper_headers,
        )
        assert response.status_code == 400

    def test_unknown_product(self, client, shopper_headers):
        response = client.post(
            "/api/v1/cart",
            json={"product_id": str(uuid.uuid4()), "quantity": 1},
            headers=shopper_headers,
        )
        assert response.status_code == 404

    def test_carts_are_per_shopper(
        self, client, shopper_headers, other_shopper_headers, make_product, fill_cart
    ):
        fill_cart((make_product(), 1))

        data = client.get("/api/v1/cart", headers=other_shopper_headers).json()
        assert data["items"] == []
