from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Any, Iterable

from quickbill.exceptions import InvalidInput

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


def to_decimal(value: Any, field: str = "value") -> Decimal:
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number")
    if not isinstance(value, Decimal):
        try:
            # str() keeps 12.99 as 12.99 instead of its binary expansion
            value = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as e:
            raise InvalidInput(f"{field} must be a number, got {value!r}") from e
    if not value.is_finite():
        raise InvalidInput(f"{field} must be a finite number, got {value}")
    return value


def to_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def format_money(value: Any, symbol: str = "") -> str:
    return f"{symbol}{to_money(value):.2f}"


def check_integer_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInput(f"quantity must be an integer, got {quantity!r}")


def line_subtotal(unit_price: Any, quantity: Any) -> Decimal:
    price = to_decimal(unit_price, "unit_price")
    if price < ZERO:
        raise InvalidInput(f"unit_price must be non-negative, got {price}")
    check_integer_quantity(quantity)
    if quantity <= 0:
        raise InvalidInput(f"quantity must be positive, got {quantity}")
    return price * quantity


def compute_totals(
    lines: Iterable[Any],
    tax_rate_percent: Any,
    package_charge: Any = ZERO,
) -> Totals:
    """
    Price a set of line items.

    Every line exposes ``unit_price`` and ``quantity``. The sums are kept exact
    and rounded half-to-even to cents once, at the end, so the displayed total
    never drifts from the sum of the line values.
    """
    rate = to_decimal(tax_rate_percent, "tax_rate_percent")
    if rate < ZERO or rate > HUNDRED:
        raise InvalidInput(f"tax_rate_percent must be within [0, 100], got {rate}")

    charge = to_decimal(package_charge, "package_charge")
    if charge < ZERO:
        raise InvalidInput(f"package_charge must be non-negative, got {charge}")

    subtotal = sum(
        (line_subtotal(line.unit_price, line.quantity) for line in lines),
        ZERO,
    )
    tax_amount = subtotal * rate / HUNDRED
    total = subtotal + tax_amount + charge

    return Totals(
        subtotal=to_money(subtotal),
        tax_amount=to_money(tax_amount),
        total=to_money(total),
    )
