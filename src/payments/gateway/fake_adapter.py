"""Configurable fake payment gateway for development and testing.

This adapter simulates a hosted checkout provider without any external calls.
It can be configured at runtime to fail session creation, to report sessions
as unpaid, or to report a total other than the sum of the line items, making
it useful for:
- Automated tests with predictable outcomes
- Development without real provider credentials
"""

from uuid import uuid4

from payments.gateway.port import LineItem, PaymentGateway, PaymentSession
from shared.errors import PaymentServiceError


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment provider unavailable"
        self.sessions_paid: bool = True
        self.reported_amount_total: int | None = None
        self.sessions: dict[str, dict] = {}
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Payment provider unavailable",
        sessions_paid: bool = True,
        reported_amount_total: int | None = None,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.sessions_paid = sessions_paid
        self.reported_amount_total = reported_amount_total

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
    ) -> PaymentSession:
        call = {
            "method": "create_checkout_session",
            "line_items": list(line_items),
            "success_url": success_url,
            "cancel_url": cancel_url,
            "customer_email": customer_email,
        }
        self.calls.append(call)

        if not self.should_succeed:
            raise PaymentServiceError(self.failure_reason)

        session_id = f"cs_fake_{uuid4().hex[:16]}"
        amount_total = sum(item.unit_amount * item.quantity for item in line_items)
        if self.reported_amount_total is not None:
            amount_total = self.reported_amount_total
        self.sessions[session_id] = {"amount_total": amount_total, "line_items": list(line_items)}
        return PaymentSession(
            session_id=session_id,
            checkout_url=f"https://checkout.fake/pay/{session_id}",
            amount_total=amount_total,
        )

    def is_session_paid(self, session_id: str) -> bool:
        self.calls.append({"method": "is_session_paid", "session_id": session_id})
        if not self.should_succeed:
            raise PaymentServiceError(self.failure_reason, session_id=session_id)
        return self.sessions_paid and session_id in self.sessions
