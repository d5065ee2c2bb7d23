"""Tests for the checkout orchestrator: begin, complete and cancel."""

from decimal import Decimal

import pytest
from ordering.cart.items import CartService
from ordering.checkout.orchestrator import CheckoutService
from ordering.checkout.session import CheckoutStatus
from ordering.order.order import Order
from shared.errors import EmptyCart, NotFound, PaymentServiceError, Unauthorized
from shared.money import to_minor_units


def _checkout_service(stores, gateway, currency):
    return CheckoutService(
        carts=CartService(stores.carts, stores.products, currency=currency),
        orders=stores.orders,
        sessions=stores.checkout_sessions,
        gateway=gateway,
        currency=currency,
        success_url="http://testserver/checkout/success?session_id={CHECKOUT_SESSION_ID}",
        cancel_url="http://testserver/checkout/cancel",
    )


def _stored_session_count(stores):
    return stores.checkout_sessions.repo._dao.query.all().total


@pytest.fixture()
def carts(stores):
    return CartService(stores.carts, stores.products, currency="usd")


@pytest.fixture()
def checkout(stores, gateway):
    return _checkout_service(stores, gateway, "usd")


@pytest.fixture()
def filled_cart(carts, buyer, make_product):
    """P1 (10.00) x2 and P2 (5.00) x1."""
    p1 = make_product(title="P1", price="10.00", description="First")
    p2 = make_product(title="P2", price="5.00")
    carts.add_product(buyer, p1.id)
    carts.add_product(buyer, p1.id)
    carts.add_product(buyer, p2.id)
    return p1, p2


class TestBeginCheckout:
    def test_empty_cart_rejected_without_payment_call(self, checkout, buyer, gateway, stores):
        with pytest.raises(EmptyCart):
            checkout.begin(buyer)
        assert gateway.calls == []
        assert stores.orders.list_by_user(buyer.user_id) == []

    def test_creates_pending_session_with_snapshot(self, checkout, buyer, filled_cart, stores):
        session = checkout.begin(buyer)
        stored = stores.checkout_sessions.get(session.session_id)
        assert stored.status == CheckoutStatus.PENDING.value
        assert stored.total_amount == Decimal("25.00")
        assert [(line.title, line.quantity) for line in stored.lines] == [("P1", 2), ("P2", 1)]

    def test_line_items_sent_in_minor_units(self, checkout, buyer, filled_cart, gateway):
        checkout.begin(buyer)
        call = gateway.calls[0]
        items = call["line_items"]
        assert [(i.name, i.unit_amount, i.quantity, i.currency) for i in items] == [
            ("P1", 1000, 2, "usd"),
            ("P2", 500, 1, "usd"),
        ]
        assert items[0].description == "First"
        assert call["customer_email"] == buyer.email
        assert sum(i.unit_amount * i.quantity for i in items) == 2500

    def test_begin_does_not_touch_cart(self, checkout, carts, buyer, filled_cart):
        checkout.begin(buyer)
        assert carts.view(buyer).total == Decimal("25.00")

    def test_payment_failure_persists_nothing(self, checkout, carts, buyer, filled_cart, gateway, stores):
        gateway.configure(should_succeed=False)
        with pytest.raises(PaymentServiceError):
            checkout.begin(buyer)
        assert len(gateway.calls) == 1  # no retry
        assert stores.orders.list_by_user(buyer.user_id) == []
        assert _stored_session_count(stores) == 0
        assert carts.view(buyer).total == Decimal("25.00")

    def test_provider_amount_mismatch_is_rejected(self, checkout, carts, buyer, filled_cart, gateway, stores):
        gateway.configure(should_succeed=True, reported_amount_total=2499)
        with pytest.raises(PaymentServiceError):
            checkout.begin(buyer)
        assert _stored_session_count(stores) == 0
        assert carts.view(buyer).total == Decimal("25.00")


class TestCompleteCheckout:
    def test_scenario_places_order_and_clears_cart(self, checkout, carts, buyer, filled_cart, stores):
        session = checkout.begin(buyer)
        order = checkout.complete(buyer, session.session_id)

        assert order.items_total() == Decimal("25.00")
        assert len(order.items) == 2
        assert order.email == buyer.email
        assert order.checkout_session_id == session.session_id
        assert carts.view(buyer).is_empty
        assert stores.checkout_sessions.get(session.session_id).order_id == order.id

    def test_order_total_matches_amount_sent_to_provider(self, checkout, buyer, filled_cart, gateway):
        session = checkout.begin(buyer)
        sent = sum(i.unit_amount * i.quantity for i in gateway.calls[0]["line_items"])
        order = checkout.complete(buyer, session.session_id)
        assert to_minor_units(order.total, "usd") == sent

    def test_zero_decimal_currency_charge_matches_order_total(self, stores, gateway, buyer, make_product):
        checkout = _checkout_service(stores, gateway, "jpy")
        product = make_product(title="P1", price="10.50")
        checkout.carts.add_product(buyer, product.id)
        checkout.carts.add_product(buyer, product.id)

        session = checkout.begin(buyer)
        sent = sum(i.unit_amount * i.quantity for i in gateway.calls[0]["line_items"])
        order = checkout.complete(buyer, session.session_id)

        assert sent == 22
        assert to_minor_units(order.total, "jpy") == sent
        assert order.items_total() == Decimal("22")

    def test_order_snapshot_ignores_later_price_changes(self, checkout, buyer, filled_cart, stores):
        p1, _ = filled_cart
        session = checkout.begin(buyer)
        p1.update_details(price="99.00")
        stores.products.add(p1)
        order = checkout.complete(buyer, session.session_id)
        assert order.items_total() == Decimal("25.00")

    def test_duplicate_delivery_yields_single_order(self, checkout, buyer, filled_cart, stores):
        session = checkout.begin(buyer)
        first = checkout.complete(buyer, session.session_id)
        second = checkout.complete(buyer, session.session_id)
        assert first.id == second.id
        assert len(stores.orders.list_by_user(buyer.user_id)) == 1

    def test_order_saved_by_concurrent_delivery_is_reused(self, checkout, buyer, filled_cart, stores):
        session = checkout.begin(buyer)
        pending = stores.checkout_sessions.get(session.session_id)
        existing = Order.place(
            user_id=buyer.user_id,
            email=buyer.email,
            lines=pending.line_snapshot(),
            currency="usd",
            checkout_session_id=session.session_id,
        )
        stores.orders.save(existing)

        order = checkout.complete(buyer, session.session_id)
        assert order.id == existing.id
        assert len(stores.orders.list_by_user(buyer.user_id)) == 1

    def test_other_user_cannot_complete(self, checkout, buyer, seller, filled_cart, carts, stores):
        session = checkout.begin(buyer)
        with pytest.raises(Unauthorized):
            checkout.complete(seller, session.session_id)
        assert stores.orders.list_by_user(buyer.user_id) == []
        assert not carts.view(buyer).is_empty

    def test_unpaid_session_rejected(self, checkout, buyer, filled_cart, gateway, carts, stores):
        session = checkout.begin(buyer)
        gateway.configure(should_succeed=True, sessions_paid=False)
        with pytest.raises(PaymentServiceError):
            checkout.complete(buyer, session.session_id)
        assert stores.orders.list_by_user(buyer.user_id) == []
        assert carts.view(buyer).total == Decimal("25.00")

    def test_unknown_session(self, checkout, buyer):
        with pytest.raises(NotFound):
            checkout.complete(buyer, "cs_unknown")

    def test_failed_order_save_leaves_cart(self, checkout, buyer, filled_cart, carts, stores, monkeypatch):
        session = checkout.begin(buyer)

        def _fail(order):
            raise RuntimeError("disk full")

        monkeypatch.setattr(stores.orders, "save", _fail)
        with pytest.raises(RuntimeError):
            checkout.complete(buyer, session.session_id)
        assert carts.view(buyer).total == Decimal("25.00")
        assert stores.checkout_sessions.get(session.session_id).status == CheckoutStatus.PENDING.value


class TestCancelCheckout:
    def test_cancel_keeps_cart(self, checkout, carts, buyer, filled_cart, stores):
        session = checkout.begin(buyer)
        cancelled = checkout.cancel(buyer, session.session_id)
        assert cancelled.status == CheckoutStatus.CANCELLED.value
        assert stores.checkout_sessions.get(session.session_id).status == CheckoutStatus.CANCELLED.value
        assert carts.view(buyer).total == Decimal("25.00")

    def test_cancel_after_completion_changes_nothing(self, checkout, buyer, filled_cart):
        session = checkout.begin(buyer)
        checkout.complete(buyer, session.session_id)
        assert checkout.cancel(buyer, session.session_id).status == CheckoutStatus.COMPLETED.value

    def test_other_user_cannot_cancel(self, checkout, buyer, seller, filled_cart):
        session = checkout.begin(buyer)
        with pytest.raises(Unauthorized):
            checkout.cancel(seller, session.session_id)
