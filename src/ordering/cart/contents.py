"""Cart contents — cart entries joined with current product details."""

from dataclasses import dataclass
from decimal import Decimal

import structlog

from catalogue.product.repository import ProductRepository
from ordering.cart.cart import ShoppingCart
from shared.money import line_total, sum_lines, to_amount

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    product_id: str
    title: str
    description: str
    image_url: str
    price: Decimal
    quantity: int
    currency: str = "usd"

    @property
    def subtotal(self) -> Decimal:
        return line_total(self.price, self.quantity, self.currency)


@dataclass(frozen=True)
class CartContents:
    user_id: str
    lines: list[CartLine]
    currency: str = "usd"

    @property
    def total(self) -> Decimal:
        return sum_lines(((line.price, line.quantity) for line in self.lines), self.currency)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def quantity_of(self, product_id: str) -> int:
        return next((line.quantity for line in self.lines if line.product_id == product_id), 0)


def resolve_contents(cart: ShoppingCart, products: ProductRepository, currency: str = "usd") -> CartContents:
    """Join cart entries with the catalogue, keeping cart insertion order.

    Prices are rounded to the currency's minor unit; totals are computed from
    the rounded figures.

    Entries whose product has since been deleted are left out.
    """
    found = products.find_many([str(item.product_id) for item in cart.items])

    lines = []
    for item in cart.items:
        product = found.get(str(item.product_id))
        if product is None:
            logger.warning("Cart references a missing product", user_id=str(cart.user_id), product_id=str(item.product_id))
            continue
        lines.append(
            CartLine(
                product_id=str(product.id),
                title=product.title,
                description=product.description or "",
                image_url=product.image_url or "",
                price=to_amount(product.price, currency),
                quantity=item.quantity,
                currency=currency,
            )
        )

    return CartContents(user_id=str(cart.user_id), lines=lines, currency=currency)
