import uuid
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from quickbill.service.receipts import build_receipt, order_number, render_receipt_text


def make_order(**overrides):
    items = [
        SimpleNamespace(product_name="Masala Dosa", quantity=2, unit_price=Decimal("12.99"), subtotal=Decimal("25.98")),
        SimpleNamespace(product_name="Filter Coffee", quantity=1, unit_price=Decimal("4.50"), subtotal=Decimal("4.50")),
    ]
    fields = dict(
        id=uuid.UUID("5f2b8c1e-0000-4000-8000-000000000001"),
        customer_name="Asha",
        table_number="7",
        status="completed",
        created_at=datetime(2026, 3, 14, 19, 5, tzinfo=timezone.utc),
        items=items,
        subtotal=Decimal("30.48"),
        tax_rate=Decimal("8.00"),
        tax_amount=Decimal("2.44"),
        package_charge=Decimal("0.00"),
        total_amount=Decimal("32.92"),
        notes=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_order_number_is_first_uuid_segment():
    assert order_number(uuid.UUID("5f2b8c1e-0000-4000-8000-000000000001")) == "5F2B8C1E"


def test_receipt_uses_stored_amounts():
    # stored values win even if they disagree with what repricing would give today
    order = make_order(tax_amount=Decimal("2.40"), total_amount=Decimal("32.88"))
    receipt = build_receipt(order, "Dosa Corner", "₹")

    assert receipt.tax_amount == Decimal("2.40")
    assert receipt.total == Decimal("32.88")
    assert [(l.name, l.quantity) for l in receipt.lines] == [("Masala Dosa", 2), ("Filter Coffee", 1)]


def test_text_receipt_layout():
    text = render_receipt_text(build_receipt(make_order(), "Dosa Corner", "₹"))
    lines = text.splitlines()

    assert lines[0].strip() == "Dosa Corner"
    assert "Order #5F2B8C1E" in lines[1]
    assert "2026-03-14 19:05" in lines[2]
    assert "Customer: Asha" in lines
    assert "Table: 7" in lines
    assert "  2 x ₹12.99" in lines
    assert any(l.startswith("Tax (8%)") and l.endswith("₹2.44") for l in lines)
    assert any(l.startswith("TOTAL") and l.endswith("₹32.92") for l in lines)
    assert not any(l.startswith("Package charge") for l in lines)
    assert text.endswith("Thank you for your visit!\n")


def test_text_receipt_shows_package_charge_and_notes():
    order = make_order(
        package_charge=Decimal("15.00"),
        total_amount=Decimal("47.92"),
        notes="Less spicy",
        customer_name=None,
        table_number=None,
    )
    lines = render_receipt_text(build_receipt(order, "Dosa Corner", "")).splitlines()

    assert any(l.startswith("Package charge") and l.endswith("15.00") for l in lines)
    assert "Notes: Less spicy" in lines
    assert not any(l.startswith("Customer:") for l in lines)


def test_long_item_names_are_cut_to_width():
    order = make_order()
    order.items[0].product_name = "Extra Large Family Pack Paneer Butter Masala"
    lines = render_receipt_text(build_receipt(order, "Dosa Corner", "₹"), width=32).splitlines()

    assert all(len(l) <= 32 for l in lines)
    assert any(l.startswith("Extra Large") and "~" in l for l in lines)
