"""Invoice document — the printable view of a placed order.

The total is recomputed from the lines rather than copied from the order, so a
rendered invoice can be checked against what the payment provider charged.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ordering.order.order import Order
from shared.money import line_total, sum_lines, to_amount


@dataclass(frozen=True)
class InvoiceLine:
    title: str
    quantity: int
    unit_price: Decimal
    currency: str

    @property
    def total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity, self.currency)


@dataclass(frozen=True)
class InvoiceDocument:
    order_id: str
    email: str
    currency: str
    issued_at: datetime
    lines: tuple[InvoiceLine, ...]

    @classmethod
    def for_order(cls, order: Order) -> "InvoiceDocument":
        return cls(
            order_id=str(order.id),
            email=order.email,
            currency=order.currency,
            issued_at=order.created_at,
            lines=tuple(
                InvoiceLine(
                    title=item.title,
                    quantity=item.quantity,
                    unit_price=to_amount(item.price, order.currency),
                    currency=order.currency,
                )
                for item in order.items
            ),
        )

    @property
    def filename(self) -> str:
        return f"invoice-{self.order_id}.pdf"

    @property
    def total(self) -> Decimal:
        return sum_lines(((line.unit_price, line.quantity) for line in self.lines), self.currency)
