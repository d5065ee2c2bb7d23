"""Integration tests for the cart, checkout and order endpoints."""

import pytest


@pytest.fixture()
def seller_client(make_client):
    return make_client("seller@example.com")


@pytest.fixture()
def buyer_client(make_client):
    return make_client("buyer@example.com")


@pytest.fixture()
def products(seller_client):
    p1 = seller_client.post("/admin/products", json={"title": "P1", "price": "10.00"}).json()
    p2 = seller_client.post("/admin/products", json={"title": "P2", "price": "5.00"}).json()
    return p1, p2


def _fill_cart(client, products):
    p1, p2 = products
    for product_id in (p1["id"], p1["id"], p2["id"]):
        response = client.post("/cart", json={"product_id": product_id})
        assert response.status_code == 200, response.text
    return response.json()


class TestCartEndpoints:
    def test_requires_login(self, client):
        assert client.get("/cart").status_code == 401

    def test_add_and_view(self, buyer_client, products):
        cart = _fill_cart(buyer_client, products)
        assert [(i["title"], i["quantity"], i["subtotal"]) for i in cart["items"]] == [
            ("P1", 2, "20.00"),
            ("P2", 1, "5.00"),
        ]
        assert cart["total"] == "25.00"
        assert buyer_client.get("/cart").json() == cart

    def test_add_unknown_product_is_404(self, buyer_client):
        assert buyer_client.post("/cart", json={"product_id": "missing"}).status_code == 404

    def test_remove(self, buyer_client, products):
        _fill_cart(buyer_client, products)
        p1, _ = products
        response = buyer_client.delete(f"/cart/items/{p1['id']}")
        assert response.status_code == 200
        assert [i["title"] for i in response.json()["items"]] == ["P2"]

    def test_remove_absent_is_noop(self, buyer_client, products):
        _fill_cart(buyer_client, products)
        response = buyer_client.delete("/cart/items/not-in-cart")
        assert response.status_code == 200
        assert response.json()["total"] == "25.00"


class TestCheckoutEndpoints:
    def test_empty_cart_is_400(self, buyer_client, gateway):
        assert buyer_client.post("/checkout").status_code == 400
        assert gateway.calls == []

    def test_full_purchase(self, buyer_client, products):
        _fill_cart(buyer_client, products)

        response = buyer_client.post("/checkout")
        assert response.status_code == 201
        session = response.json()
        assert session["total"] == "25.00"
        assert session["status"] == "Pending"
        assert session["checkout_url"].startswith("https://")

        response = buyer_client.get("/checkout/success", params={"session_id": session["session_id"]})
        assert response.status_code == 200
        order = response.json()
        assert order["total"] == "25.00"
        assert len(order["items"]) == 2

        assert buyer_client.get("/cart").json()["items"] == []
        orders = buyer_client.get("/orders").json()
        assert [o["order_id"] for o in orders] == [order["order_id"]]

    def test_repeated_success_redirect_is_idempotent(self, buyer_client, products):
        _fill_cart(buyer_client, products)
        session_id = buyer_client.post("/checkout").json()["session_id"]
        first = buyer_client.get("/checkout/success", params={"session_id": session_id}).json()
        second = buyer_client.get("/checkout/success", params={"session_id": session_id}).json()
        assert first["order_id"] == second["order_id"]
        assert len(buyer_client.get("/orders").json()) == 1

    def test_payment_failure_is_500_and_keeps_cart(self, buyer_client, products, gateway):
        _fill_cart(buyer_client, products)
        gateway.configure(should_succeed=False, failure_reason="Provider timeout")
        response = buyer_client.post("/checkout")
        assert response.status_code == 500
        assert "Provider timeout" not in response.text
        assert buyer_client.get("/cart").json()["total"] == "25.00"
        assert buyer_client.get("/orders").json() == []

    def test_provider_amount_mismatch_is_500(self, buyer_client, products, gateway):
        _fill_cart(buyer_client, products)
        gateway.configure(should_succeed=True, reported_amount_total=1)
        response = buyer_client.post("/checkout")
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
        assert buyer_client.get("/cart").json()["total"] == "25.00"

    def test_cancel_keeps_cart(self, buyer_client, products):
        _fill_cart(buyer_client, products)
        session_id = buyer_client.post("/checkout").json()["session_id"]
        response = buyer_client.get("/checkout/cancel", params={"session_id": session_id})
        assert response.status_code == 200
        assert response.json()["status"] == "Cancelled"
        assert buyer_client.get("/cart").json()["total"] == "25.00"

    def test_cancel_redirect_without_session(self, buyer_client):
        response = buyer_client.get("/checkout/cancel")
        assert response.status_code == 200
        assert response.json() is None

    def test_other_user_cannot_complete_session(self, buyer_client, products, make_client):
        _fill_cart(buyer_client, products)
        session_id = buyer_client.post("/checkout").json()["session_id"]
        intruder = make_client("intruder@example.com")
        response = intruder.get("/checkout/success", params={"session_id": session_id})
        assert response.status_code == 403
        assert buyer_client.get("/orders").json() == []
