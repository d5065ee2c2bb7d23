"""Stripe payment gateway adapter.

Uses stripe-python's Checkout Sessions API. Network retries are disabled: a
failed session creation surfaces immediately as PaymentServiceError and the
caller decides what to do.
"""

import stripe
import structlog

from payments.gateway.port import LineItem, PaymentGateway, PaymentSession
from shared.errors import PaymentServiceError

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key
        stripe.max_network_retries = 0

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
    ) -> PaymentSession:
        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": item.currency,
                        "unit_amount": item.unit_amount,
                        "product_data": {
                            "name": item.name,
                            # Stripe rejects empty descriptions
                            **({"description": item.description} if item.description else {}),
                        },
                    },
                    "quantity": item.quantity,
                }
                for item in line_items
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as exc:
            logger.error("Stripe session creation failed", error=str(exc))
            raise PaymentServiceError("Payment session could not be created") from exc

        return PaymentSession(
            session_id=session.id,
            checkout_url=session.url,
            amount_total=session.amount_total,
        )

    def is_session_paid(self, session_id: str) -> bool:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.error("Stripe session lookup failed", session_id=session_id, error=str(exc))
            raise PaymentServiceError("Payment session could not be verified", session_id=session_id) from exc
        return session.payment_status == "paid"
