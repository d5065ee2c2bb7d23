"""Payment gateway port (abstract interface).

Defines the contract every hosted-checkout adapter implements, so the checkout
orchestrator can switch between FakeGateway (dev/test) and StripeGateway
(production) without changes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class LineItem:
    """One purchasable line sent to the payment provider."""

    name: str
    description: str
    unit_amount: int  # minor units (cents)
    currency: str
    quantity: int


@dataclass(frozen=True)
class PaymentSession:
    """A hosted checkout session created by the provider."""

    session_id: str
    checkout_url: str
    amount_total: int | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface.

    Implementations raise PaymentServiceError for any provider failure.
    """

    @abstractmethod
    def create_checkout_session(
        self,
        line_items: list[LineItem],
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
    ) -> PaymentSession:
        """Create a hosted checkout session for the given line items."""
        ...

    @abstractmethod
    def is_session_paid(self, session_id: str) -> bool:
        """Report whether the provider has collected payment for a session."""
        ...
