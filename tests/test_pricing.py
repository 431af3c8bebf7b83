from decimal import Decimal
from types import SimpleNamespace

import pytest

from quickbill.exceptions import InvalidInput
from quickbill.service.pricing import compute_totals, format_money, to_money


def line(price, qty):
    return SimpleNamespace(unit_price=price, quantity=qty)


def test_receipt_example_from_the_counter():
    totals = compute_totals([line(Decimal("12.99"), 2), line(Decimal("4.50"), 1)], 8, 0)

    assert totals.subtotal == Decimal("30.48")
    # 30.48 * 0.08 = 2.4384
    assert totals.tax_amount == Decimal("2.44")
    assert totals.total == Decimal("32.92")


def test_float_prices_are_taken_at_face_value():
    totals = compute_totals([line(12.99, 2), line(4.5, 1)], 8)
    assert totals.subtotal == Decimal("30.48")
    assert totals.total == Decimal("32.92")


def test_subtotal_does_not_depend_on_line_order():
    lines = [line(Decimal("3.10"), 3), line(Decimal("0.99"), 7), line(Decimal("15.00"), 1)]
    forward = compute_totals(lines, Decimal("12.5"), Decimal("1.50"))
    backward = compute_totals(list(reversed(lines)), Decimal("12.5"), Decimal("1.50"))

    assert forward == backward
    assert forward.subtotal == Decimal("3.10") * 3 + Decimal("0.99") * 7 + Decimal("15.00")


def test_zero_tax_gives_exactly_zero_tax():
    totals = compute_totals([line(Decimal("999.99"), 3)], 0, Decimal("2.00"))
    assert totals.tax_amount == Decimal("0.00")
    assert totals.total == totals.subtotal + Decimal("2.00")


def test_no_tax_no_package_total_equals_subtotal():
    totals = compute_totals([line(Decimal("7.25"), 4), line(Decimal("0.50"), 1)], 0, 0)
    assert totals.total == totals.subtotal == Decimal("29.50")


def test_package_charge_is_added_flat():
    totals = compute_totals([line(Decimal("10.00"), 5)], 10, Decimal("15"))
    assert totals.subtotal == Decimal("50.00")
    assert totals.tax_amount == Decimal("5.00")
    assert totals.total == Decimal("70.00")


def test_rounding_is_half_even_and_applied_once():
    totals = compute_totals([line(Decimal("10.25"), 1)], 10, 0)

    # 1.025 rounds to the even cent
    assert totals.tax_amount == Decimal("1.02")
    # total comes from the exact 11.275, not from 10.25 + 1.02
    assert totals.total == Decimal("11.28")


def test_line_values_are_not_rounded_before_summing():
    lines = [line(Decimal("0.333"), 1), line(Decimal("0.333"), 1), line(Decimal("0.334"), 1)]
    assert compute_totals(lines, 0).subtotal == Decimal("1.00")


def test_empty_lines_price_to_zero():
    totals = compute_totals([], 8, 0)
    assert totals.subtotal == totals.tax_amount == totals.total == Decimal("0.00")


def test_rounding_is_idempotent():
    total = compute_totals([line(Decimal("1.115"), 3)], Decimal("7.75"), Decimal("0.3")).total
    assert to_money(to_money(total)) == to_money(total) == total


@pytest.mark.parametrize(
    "lines,tax,package",
    [
        ([line(Decimal("1.00"), 0)], 8, 0),
        ([line(Decimal("1.00"), -2)], 8, 0),
        ([line(Decimal("1.00"), 1.5)], 8, 0),
        ([line(Decimal("-0.01"), 1)], 8, 0),
        ([line("abc", 1)], 8, 0),
        ([line(Decimal("1.00"), 1)], -1, 0),
        ([line(Decimal("1.00"), 1)], Decimal("100.01"), 0),
        ([line(Decimal("1.00"), 1)], 8, Decimal("-0.50")),
        ([line(Decimal("1.00"), 1)], Decimal("NaN"), 0),
        ([line(Decimal("1.00"), 1)], float("nan"), 0),
        ([line(Decimal("1.00"), 1)], 8, Decimal("Infinity")),
        ([line(Decimal("Infinity"), 1)], 8, 0),
        ([line(float("nan"), 1)], 8, 0),
    ],
)
def test_invalid_input_is_rejected_not_clamped(lines, tax, package):
    with pytest.raises(InvalidInput):
        compute_totals(lines, tax, package)


def test_boundary_tax_rates_are_accepted():
    assert compute_totals([line(Decimal("4.00"), 1)], 0).total == Decimal("4.00")
    assert compute_totals([line(Decimal("4.00"), 1)], 100).total == Decimal("8.00")


def test_free_items_are_allowed():
    assert compute_totals([line(Decimal("0"), 2)], 8).total == Decimal("0.00")


def test_format_money():
    assert format_money(Decimal("32.9184"), "₹") == "₹32.92"
    assert format_money(5) == "5.00"
