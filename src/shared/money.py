"""Monetary helpers: Decimal amounts at the currency's precision and minor-unit conversion.

Aggregates keep amounts in Float fields; every calculation goes through
``to_amount`` so prices, line totals and the amount sent to the payment
provider are all rounded the same way.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

VALID_CURRENCIES = frozenset(
    {
        "usd",
        "eur",
        "gbp",
        "jpy",
        "cad",
        "aud",
        "chf",
        "sek",
        "nok",
        "dkk",
    }
)

# Currencies without a minor unit
_ZERO_DECIMAL = frozenset({"jpy"})


def minor_unit_exponent(currency: str) -> int:
    return 0 if currency.lower() in _ZERO_DECIMAL else 2


def to_amount(value, currency: str) -> Decimal:
    """Coerce a price to a Decimal rounded to the currency's smallest unit."""
    quantum = Decimal(1).scaleb(-minor_unit_exponent(currency))
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int, currency: str) -> Decimal:
    return to_amount(unit_price, currency) * quantity


def sum_lines(lines: Iterable[tuple], currency: str) -> Decimal:
    """Sum ``(unit_price, quantity)`` pairs."""
    return sum((line_total(price, quantity, currency) for price, quantity in lines), to_amount(0, currency))


def to_minor_units(amount, currency: str) -> int:
    """Convert an amount to the integer unit payment providers expect (cents, or yen)."""
    return int(to_amount(amount, currency).scaleb(minor_unit_exponent(currency)))


def from_minor_units(units: int, currency: str) -> Decimal:
    return to_amount(Decimal(units).scaleb(-minor_unit_exponent(currency)), currency)
