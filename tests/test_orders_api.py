"""Tests for checkout, order history and admin order handling."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from boutique.core.notifications import OrderNotifier, get_notifier
from boutique.main import app
from boutique.models.coupon import Coupon
from boutique.repositories.coupon_repo import CouponRepository
from boutique.routers import orders as orders_router

CHECKOUT = {
    "customer_name": "Ayesha Khan",
    "phone_number": "+91 98765 43210",
    "address": "12 Residency Road, Bengaluru",
    "notes": "  ",
}


def checkout(client, headers, **overrides):
    return client.post("/api/v1/orders/checkout", json={**CHECKOUT, **overrides}, headers=headers)


class TestCheckout:
    def test_without_coupon(self, client, shopper_headers, make_product, fill_cart):
        fill_cart((make_product(price="500"), 2))

        response = checkout(client, shopper_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["subtotal"] == 1000
        assert data["discount"] == 0
        assert data["total_amount"] == 1000
        assert data["customer_email"] == "ayesha@example.com"
        assert data["notes"] is None
        assert data["coupon_code"] is None
        assert data["coupon_redemption"] is None
        assert [(i["title"], i["quantity"], i["line_total"]) for i in data["items"]] == [
            ("Embroidered Kurta", 2, 1000)
        ]

    def test_clears_cart(self, client, shopper_headers, make_product, fill_cart):
        fill_cart((make_product(), 1))
        checkout(client, shopper_headers)

        assert client.get("/api/v1/cart", headers=shopper_headers).json()["items"] == []

    def test_with_coupon_redeems_once(
        self, client, shopper_headers, session, make_product, make_coupon, fill_cart
    ):
        fill_cart((make_product(price="500"), 2))
        coupon = make_coupon("SAVE20", max_uses=5, used_count=1)

        response = checkout(client, shopper_headers, coupon_code="save20")

        assert response.status_code == 201
        data = response.json()
        assert data["discount"] == 200
        assert data["total_amount"] == 800
        assert data["coupon_code"] == "SAVE20"
        assert data["coupon_redemption"] == "redeemed"

        session.expire_all()
        assert session.get(Coupon, coupon.id).used_count == 2

    def test_money_rounded_to_cents(self, client, shopper_headers, make_product, make_coupon, fill_cart):
        fill_cart((make_product(price="333.33"), 1))
        make_coupon("SAVE15", discount_value=Decimal("15"))

        data = checkout(client, shopper_headers, coupon_code="SAVE15").json()

        assert data["subtotal"] == 333.33
        assert data["discount"] == 50.0
        assert data["total_amount"] == 283.33

    def test_empty_cart(self, client, shopper_headers):
        response = checkout(client, shopper_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "empty_cart"

    def test_invalid_coupon_blocks_order(
        self, client, shopper_headers, make_product, make_coupon, fill_cart
    ):
        fill_cart((make_product(price="500"), 1))
        make_coupon("BIGSPEND", min_purchase=Decimal("600"))

        response = checkout(client, shopper_headers, coupon_code="BIGSPEND")

        assert response.status_code == 422
        assert response.json()["code"] == "below_minimum"
        assert client.get("/api/v1/orders/me", headers=shopper_headers).json() == []
        assert len(client.get("/api/v1/cart", headers=shopper_headers).json()["items"]) == 1

    def test_unavailable_product_blocks_order(
        self, client, shopper_headers, session, make_product, fill_cart
    ):
        product = make_product()
        fill_cart((product, 1))
        product.available = False
        session.add(product)
        session.commit()

        response = checkout(client, shopper_headers)

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Cart validation failed"

    def test_missing_required_fields(self, client, shopper_headers, make_product, fill_cart):
        fill_cart((make_product(), 1))
        response = checkout(client, shopper_headers, address="   ")
        assert response.status_code == 422

    def test_fixed_discount_over_subtotal_unclamped_by_default(
        self, client, shopper_headers, make_product, make_coupon, fill_cart
    ):
        fill_cart((make_product(price="500"), 1))
        make_coupon("FLAT800", discount_type="fixed", discount_value=Decimal("800"))

        data = checkout(client, shopper_headers, coupon_code="FLAT800").json()

        assert data["discount"] == 800
        assert data["total_amount"] == -300

    def test_fixed_discount_clamped_when_enabled(
        self, client, shopper_headers, make_product, make_coupon, fill_cart, monkeypatch
    ):
        monkeypatch.setattr(orders_router.service.coupon_service, "clamp_fixed_discount", True)
        fill_cart((make_product(price="500"), 1))
        make_coupon("FLAT800", discount_type="fixed", discount_value=Decimal("800"))

        response = checkout(client, shopper_headers, coupon_code="FLAT800")

        assert response.status_code == 201
        data = response.json()
        assert data["subtotal"] == 500
        assert data["discount"] == 500
        assert data["total_amount"] == 0
        assert data["coupon_redemption"] == "redeemed"

    def test_cap_reached_at_redemption_keeps_order(
        self, client, shopper_headers, make_product, make_coupon, fill_cart, monkeypatch
    ):
        fill_cart((make_product(price="500"), 2))
        make_coupon("LAST1", max_uses=1, used_count=0)
        # Another shopper redeemed the last use between validation and redemption
        monkeypatch.setattr(
            CouponRepository, "increment_usage_if_below_cap", lambda self, s, cid: None
        )

        response = checkout(client, shopper_headers, coupon_code="LAST1")

        assert response.status_code == 201
        data = response.json()
        assert data["coupon_redemption"] == "usage_exceeded"
        assert "usage limit" in data["coupon_message"]
        assert len(client.get("/api/v1/orders/me", headers=shopper_headers).json()) == 1

    def test_storage_error_at_redemption_keeps_order(
        self, client, shopper_headers, make_product, make_coupon, fill_cart, monkeypatch
    ):
        fill_cart((make_product(price="500"), 2))
        make_coupon("SAVE20")

        def broken(self, session, coupon_id):
            raise OperationalError("UPDATE coupons", {}, Exception("connection lost"))

        monkeypatch.setattr(CouponRepository, "increment_usage_if_below_cap", broken)

        response = checkout(client, shopper_headers, coupon_code="SAVE20")

        assert response.status_code == 201
        assert response.json()["coupon_redemption"] == "failed"
        assert response.json()["total_amount"] == 800


class TestOrderHistory:
    def test_list_and_get_own(self, client, shopper_headers, make_product, fill_cart):
        fill_cart((make_product(), 1))
        order_id = checkout(client, shopper_headers).json()["id"]

        listed = client.get("/api/v1/orders/me", headers=shopper_headers).json()
        detail = client.get(f"/api/v1/orders/me/{order_id}", headers=shopper_headers)

        assert [o["id"] for o in listed] == [order_id]
        assert detail.status_code == 200
        assert len(detail.json()["items"]) == 1

    def test_cannot_read_other_shoppers_order(
        self, client, shopper_headers, other_shopper_headers, make_product, fill_cart
    ):
        fill_cart((make_product(), 1))
        order_id = checkout(client, shopper_headers).json()["id"]

        response = client.get(f"/api/v1/orders/me/{order_id}", headers=other_shopper_headers)
        assert response.status_code == 404


@pytest.fixture
def placed_order(client, shopper_headers, make_product, fill_cart):
    fill_cart((make_product(price="500"), 2))
    return checkout(client, shopper_headers).json()


class TestAdminOrders:
    def test_requires_admin(self, client, shopper_headers):
        assert client.get("/api/v1/orders", headers=shopper_headers).status_code == 403

    def test_list_with_status_filter(self, client, admin_headers, placed_order):
        pending = client.get("/api/v1/orders?status_filter=pending", headers=admin_headers)
        accepted = client.get("/api/v1/orders?status_filter=accepted", headers=admin_headers)

        assert [o["id"] for o in pending.json()] == [placed_order["id"]]
        assert accepted.json() == []

    def test_get_any_order(self, client, admin_headers, placed_order):
        response = client.get(f"/api/v1/orders/{placed_order['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["customer_name"] == "Ayesha Khan"

    def test_accept_sends_notification(self, client, admin_headers, notifier, placed_order):
        response = client.patch(
            f"/api/v1/orders/{placed_order['id']}/status",
            json={"status": "accepted"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        assert notifier.sent == [
            {
                "customerName": "Ayesha Khan",
                "customerEmail": "ayesha@example.com",
                "orderId": placed_order["id"],
                "status": "accepted",
                "items": [{"title": "Embroidered Kurta", "quantity": 2, "price": 500.0}],
                "total": 1000.0,
            }
        ]

    def test_reject_sends_notification(self, client, admin_headers, notifier, placed_order):
        client.patch(
            f"/api/v1/orders/{placed_order['id']}/status",
            json={"status": "rejected"},
            headers=admin_headers,
        )
        assert [p["status"] for p in notifier.sent] == ["rejected"]

    def test_same_status_is_noop(self, client, admin_headers, notifier, placed_order):
        response = client.patch(
            f"/api/v1/orders/{placed_order['id']}/status",
            json={"status": "pending"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert notifier.sent == []

    def test_final_status_cannot_change(self, client, admin_headers, placed_order):
        url = f"/api/v1/orders/{placed_order['id']}/status"
        client.patch(url, json={"status": "accepted"}, headers=admin_headers)

        response = client.patch(url, json={"status": "rejected"}, headers=admin_headers)

        assert response.status_code == 400
        assert "accepted -> rejected" in response.json()["detail"]

    def test_unknown_status_rejected(self, client, admin_headers, placed_order):
        response = client.patch(
            f"/api/v1/orders/{placed_order['id']}/status",
            json={"status": "shipped"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_notification_failure_keeps_status(self, client, admin_headers, placed_order):
        class BrokenFunctions:
            def invoke(self, name, invoke_options=None):
                raise RuntimeError("edge function unavailable")

        class BrokenClient:
            functions = BrokenFunctions()

        app.dependency_overrides[get_notifier] = lambda: OrderNotifier(
            client_factory=BrokenClient, function_name="send-order-email"
        )

        response = client.patch(
            f"/api/v1/orders/{placed_order['id']}/status",
            json={"status": "accepted"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        detail = client.get(f"/api/v1/orders/{placed_order['id']}", headers=admin_headers)
        assert detail.json()["status"] == "accepted"

