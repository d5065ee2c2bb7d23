"""Checkout Orchestrator — coordinates Cart → Payment provider → Order Ledger.

Flow:
    1. begin: resolve the cart view (EmptyCart if nothing to buy), ask the
       gateway for a hosted checkout session, persist a Pending
       CheckoutSession holding the frozen line snapshot.
    2. complete: driven by the provider's success redirect. Verifies the
       session belongs to the caller and is paid, appends the Order built
       from the snapshot, marks the session Completed, then clears the cart.
    3. cancel: driven by the provider's cancel redirect. Marks the session
       Cancelled; the cart is left as it was.

A gateway failure in step 1 persists nothing and leaves the cart untouched.
Step 2 is idempotent: repeated or concurrent deliveries for the same session
resolve to the single order keyed by its checkout_session_id.
"""

import structlog

from identity.principal import AuthenticatedUser
from ordering.cart.items import CartService
from ordering.checkout.repository import CheckoutSessionRepository
from ordering.checkout.session import CheckoutSession, CheckoutStatus
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from payments.gateway.port import LineItem, PaymentGateway
from shared.errors import DuplicateKey, EmptyCart, PaymentServiceError
from shared.money import from_minor_units, to_minor_units

logger = structlog.get_logger(__name__)


class CheckoutService:
    def __init__(
        self,
        carts: CartService,
        orders: OrderRepository,
        sessions: CheckoutSessionRepository,
        gateway: PaymentGateway,
        currency: str,
        success_url: str,
        cancel_url: str,
    ) -> None:
        self.carts = carts
        self.orders = orders
        self.sessions = sessions
        self.gateway = gateway
        self.currency = currency
        self.success_url = success_url
        self.cancel_url = cancel_url

    def begin(self, user: AuthenticatedUser) -> CheckoutSession:
        contents = self.carts.view(user)
        if contents.is_empty:
            raise EmptyCart("Cannot check out an empty cart", user_id=user.user_id)

        line_items = [
            LineItem(
                name=line.title,
                description=line.description,
                unit_amount=to_minor_units(line.price, self.currency),
                currency=self.currency,
                quantity=line.quantity,
            )
            for line in contents.lines
        ]

        # Failure here leaves no trace: nothing has been written yet
        payment_session = self.gateway.create_checkout_session(
            line_items,
            success_url=self.success_url,
            cancel_url=self.cancel_url,
            customer_email=user.email,
        )

        if payment_session.amount_total is not None:
            charged = from_minor_units(payment_session.amount_total, self.currency)
            if charged != contents.total:
                logger.error(
                    "Provider amount does not match cart total",
                    user_id=user.user_id,
                    session_id=payment_session.session_id,
                    amount_total=str(charged),
                    total=str(contents.total),
                )
                raise PaymentServiceError(
                    "Payment amount does not match the order total",
                    session_id=payment_session.session_id,
                )

        session = CheckoutSession.open(
            session_id=payment_session.session_id,
            user_id=user.user_id,
            email=user.email,
            lines=[
                {
                    "product_id": line.product_id,
                    "title": line.title,
                    "description": line.description,
                    "image_url": line.image_url,
                    "price": line.price,
                    "quantity": line.quantity,
                }
                for line in contents.lines
            ],
            currency=self.currency,
            checkout_url=payment_session.checkout_url,
        )
        self.sessions.add(session)

        logger.info(
            "Checkout session created",
            user_id=user.user_id,
            session_id=payment_session.session_id,
            total=str(session.total_amount),
            currency=session.currency,
            lines=len(session.lines),
        )
        return session

    def complete(self, user: AuthenticatedUser, session_id: str) -> Order:
        session = self.sessions.get(session_id)
        session.assert_owned_by(user.user_id)

        if session.is_completed:
            logger.info("Checkout already completed", session_id=session_id, order_id=str(session.order_id))
            return self.orders.get(str(session.order_id))

        if not self.gateway.is_session_paid(session_id):
            raise PaymentServiceError("Payment has not been collected", session_id=session_id)

        order = self.orders.find_by_checkout_session(session_id)
        if order is None:
            order = Order.place(
                user_id=str(session.user_id),
                email=session.email,
                lines=session.line_snapshot(),
                currency=session.currency,
                checkout_session_id=session_id,
            )
            try:
                self.orders.save(order)
            except DuplicateKey:
                # A concurrent delivery won the insert
                order = self.orders.find_by_checkout_session(session_id)
                logger.info("Duplicate checkout completion resolved", session_id=session_id, order_id=str(order.id))
            else:
                logger.info(
                    "Order placed",
                    user_id=user.user_id,
                    order_id=str(order.id),
                    session_id=session_id,
                    total=str(order.items_total()),
                )

        session.complete(str(order.id))
        self.sessions.add(session)

        # Only after the order is safely stored
        self.carts.clear(user)
        return order

    def cancel(self, user: AuthenticatedUser, session_id: str) -> CheckoutSession:
        session = self.sessions.get(session_id)
        session.assert_owned_by(user.user_id)

        if CheckoutStatus(session.status) == CheckoutStatus.PENDING:
            session.cancel()
            self.sessions.add(session)
            logger.info("Checkout cancelled", user_id=user.user_id, session_id=session_id)
        return session
