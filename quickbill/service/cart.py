from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Iterator, Mapping

from quickbill.exceptions import InvalidInput
from quickbill.service.pricing import (
    Totals,
    check_integer_quantity,
    compute_totals,
    line_subtotal,
    to_decimal,
)


class CartLine:
    __slots__ = ("product", "quantity")

    def __init__(self, product: Any, quantity: int = 1):
        self.product = product
        self.quantity = quantity

    @property
    def product_id(self):
        return self.product.id

    @property
    def unit_price(self) -> Decimal:
        return to_decimal(self.product.price, "unit_price")

    @property
    def subtotal(self) -> Decimal:
        return line_subtotal(self.unit_price, self.quantity)

    def __repr__(self) -> str:
        return f"CartLine(product_id={self.product_id!r}, quantity={self.quantity})"


class Cart:
    """
    Line items keyed by product id, in first-add order.

    A product appears at most once and no line ever holds a quantity below 1.
    """

    def __init__(self):
        self._lines: dict[Any, CartLine] = {}

    @classmethod
    def from_items(cls, products: Mapping[Any, Any], items: Iterable[tuple[Any, int]]) -> "Cart":
        cart = cls()
        for product_id, quantity in items:
            product = products.get(product_id)
            if product is None:
                raise InvalidInput(f"Unknown product {product_id}")
            if quantity <= 0:
                raise InvalidInput(f"quantity must be positive, got {quantity}")
            line = cart.get(product_id)
            if line is None:
                cart.add_item(product)
                cart.set_quantity(product_id, quantity)
            else:
                cart.set_quantity(product_id, line.quantity + quantity)
        return cart

    def add_item(self, product: Any) -> CartLine:
        line = self._lines.get(product.id)
        if line is None:
            line = CartLine(product, 1)
            self._lines[product.id] = line
        else:
            line.quantity += 1
        return line

    def set_quantity(self, product_id: Any, quantity: int) -> None:
        line = self._lines.get(product_id)
        if line is None:
            # the line may already be gone after a racing removal
            return
        check_integer_quantity(quantity)
        if quantity <= 0:
            self.remove_item(product_id)
            return
        line.quantity = quantity

    def remove_item(self, product_id: Any) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def totals(self, tax_rate_percent: Any, package_charge: Any = 0) -> Totals:
        return compute_totals(self._lines.values(), tax_rate_percent, package_charge)

    def get(self, product_id: Any) -> CartLine | None:
        return self._lines.get(product_id)

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self._lines.values()))

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: Any) -> bool:
        return product_id in self._lines
