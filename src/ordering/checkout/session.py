"""Checkout Session — an outstanding payment session and its frozen cart snapshot.

``session_id`` is the payment provider's session id. Lines are copied from the
cart view when the session is created, so the order built on completion always
matches the amount the provider was asked to collect.

State Machine:
    PENDING → COMPLETED
    PENDING → CANCELLED → COMPLETED
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import atomic_change
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from shared.domain import storefront
from shared.errors import StorefrontError, Unauthorized
from shared.money import sum_lines, to_amount


class CheckoutStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class InvalidCheckoutTransition(StorefrontError):
    """The session is not in a state that allows the requested change."""


_VALID_TRANSITIONS = {
    CheckoutStatus.PENDING: {CheckoutStatus.COMPLETED, CheckoutStatus.CANCELLED},
    CheckoutStatus.COMPLETED: set(),  # Terminal
    # Leaving the hosted page does not stop a later payment from landing
    CheckoutStatus.CANCELLED: {CheckoutStatus.COMPLETED},
}


@storefront.entity(part_of="CheckoutSession")
class CheckoutLine:
    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    description = Text()
    image_url = String(max_length=2048)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)


@storefront.aggregate
class CheckoutSession:
    session_id = Identifier(required=True)
    user_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    lines = HasMany(CheckoutLine)
    total = Float(required=True, min_value=0.0)
    currency = String(required=True, max_length=3)
    checkout_url = String(required=True, max_length=2048)
    status = String(choices=CheckoutStatus, default=CheckoutStatus.PENDING.value)
    order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, session_id, user_id, email, lines, currency, checkout_url, **state):
        """Create a session from snapshot lines (dicts with product fields and quantity).

        ``state`` carries stored status, order id and timestamps when a session
        is rebuilt from a document.
        """
        if not lines:
            raise ValidationError({"lines": ["A checkout session needs at least one line"]})

        now = datetime.now(UTC)
        state["created_at"] = state.get("created_at") or now
        state["updated_at"] = state.get("updated_at") or now
        session = cls(
            session_id=session_id,
            user_id=user_id,
            email=email,
            total=float(sum_lines(((line["price"], line["quantity"]) for line in lines), currency)),
            currency=currency,
            checkout_url=checkout_url,
            **state,
        )
        with atomic_change(session):
            for line in lines:
                session.add_lines(
                    CheckoutLine(
                        product_id=line["product_id"],
                        title=line["title"],
                        description=line.get("description") or None,
                        image_url=line.get("image_url") or None,
                        price=float(to_amount(line["price"], currency)),
                        quantity=line["quantity"],
                    )
                )
        return session

    @property
    def total_amount(self) -> Decimal:
        return to_amount(self.total, self.currency)

    @property
    def is_completed(self) -> bool:
        return CheckoutStatus(self.status) == CheckoutStatus.COMPLETED

    def assert_owned_by(self, user_id: str) -> None:
        if str(self.user_id) != str(user_id):
            raise Unauthorized(
                "Checkout session belongs to another user", session_id=str(self.session_id), user_id=user_id
            )

    def _assert_can_transition(self, target: CheckoutStatus) -> None:
        current = CheckoutStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidCheckoutTransition(
                f"Cannot transition from {current.value} to {target.value}",
                session_id=str(self.session_id),
            )

    def line_snapshot(self) -> list[dict]:
        return [
            {
                "product_id": str(line.product_id),
                "title": line.title,
                "description": line.description or "",
                "image_url": line.image_url or "",
                "price": to_amount(line.price, self.currency),
                "quantity": line.quantity,
            }
            for line in self.lines
        ]

    def complete(self, order_id: str) -> None:
        self._assert_can_transition(CheckoutStatus.COMPLETED)
        self.status = CheckoutStatus.COMPLETED.value
        self.order_id = order_id
        self.updated_at = datetime.now(UTC)

    def cancel(self) -> None:
        self._assert_can_transition(CheckoutStatus.CANCELLED)
        self.status = CheckoutStatus.CANCELLED.value
        self.updated_at = datetime.now(UTC)
