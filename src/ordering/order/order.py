"""Order aggregate — an immutable snapshot of a completed checkout.

Line items copy the product's title, description, price and image at purchase
time, so order history does not follow later catalogue edits. Orders are only
created by checkout completion and are never modified or deleted.
"""

from datetime import UTC, datetime
from decimal import Decimal

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from shared.domain import storefront
from shared.errors import Unauthorized
from shared.money import VALID_CURRENCIES, line_total, sum_lines, to_amount


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    description = Text()
    image_url = String(max_length=2048)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    def subtotal(self, currency: str) -> Decimal:
        return line_total(self.price, self.quantity, currency)


@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    items = HasMany(OrderItem)
    total = Float(required=True, min_value=0.0)
    currency = String(required=True, max_length=3, default="usd")
    checkout_session_id = Identifier(required=True)
    created_at = DateTime()

    @invariant.post
    def currency_must_be_supported(self):
        if self.currency not in VALID_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency {self.currency!r}"]})

    @invariant.post
    def total_must_match_items(self):
        if not self.items:
            return
        if to_amount(self.total, self.currency) != self.items_total():
            raise ValidationError(
                {"total": [f"Order total {self.total} does not match its line items ({self.items_total()})"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, email, lines, currency, checkout_session_id, order_id=None, created_at=None):
        """Build an order from snapshot lines (dicts with product fields and quantity)."""
        if not lines:
            raise ValidationError({"items": ["An order needs at least one line item"]})

        total = sum_lines(((line["price"], line["quantity"]) for line in lines), currency)
        fields = {"id": order_id} if order_id else {}
        order = cls(
            **fields,
            user_id=user_id,
            email=email,
            total=float(total),
            currency=currency,
            checkout_session_id=checkout_session_id,
            created_at=created_at or datetime.now(UTC),
        )
        with atomic_change(order):
            for line in lines:
                order.add_items(
                    OrderItem(
                        product_id=line["product_id"],
                        title=line["title"],
                        description=line.get("description") or None,
                        image_url=line.get("image_url") or None,
                        price=float(to_amount(line["price"], currency)),
                        quantity=line["quantity"],
                    )
                )
        return order

    def items_total(self) -> Decimal:
        return sum_lines(((item.price, item.quantity) for item in self.items), self.currency)

    def assert_owned_by(self, user_id: str) -> None:
        if str(self.user_id) != str(user_id):
            raise Unauthorized("Order belongs to another user", order_id=str(self.id), user_id=user_id)
