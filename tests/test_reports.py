import uuid
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from quickbill.service.reports import summarize_orders

DOSA = uuid.uuid4()
COFFEE = uuid.uuid4()


def order(ts, total, *items):
    return SimpleNamespace(created_at=ts, total_amount=Decimal(total), items=list(items))


def item(pid, name, qty, subtotal):
    return SimpleNamespace(product_id=pid, product_name=name, quantity=qty, subtotal=Decimal(subtotal))


def test_summary_over_no_orders():
    summary = summarize_orders([])
    assert summary.total_revenue == Decimal("0.00")
    assert summary.total_orders == 0
    assert summary.average_order == Decimal("0.00")
    assert summary.top_products == []
    assert summary.daily_stats == []


def test_summary_groups_products_and_days():
    day1 = datetime(2026, 5, 1, 9, 30, tzinfo=timezone.utc)
    day2 = datetime(2026, 5, 2, 21, 0, tzinfo=timezone.utc)
    orders = [
        order(day1, "30.00", item(DOSA, "Dosa", 2, "20.00"), item(COFFEE, "Coffee", 2, "10.00")),
        order(day1, "5.00", item(COFFEE, "Coffee", 1, "5.00")),
        order(day2, "40.00", item(DOSA, "Dosa", 4, "40.00")),
    ]

    summary = summarize_orders(orders)

    assert summary.total_revenue == Decimal("75.00")
    assert summary.total_orders == 3
    assert summary.average_order == Decimal("25.00")
    assert [(p.product_name, p.total_quantity, p.total_revenue) for p in summary.top_products] == [
        ("Dosa", 6, Decimal("60.00")),
        ("Coffee", 3, Decimal("15.00")),
    ]
    assert [(d.date.isoformat(), d.revenue, d.orders) for d in summary.daily_stats] == [
        ("2026-05-01", Decimal("35.00"), 2),
        ("2026-05-02", Decimal("40.00"), 1),
    ]


def test_deleted_products_still_counted_by_name():
    ts = datetime(2026, 5, 1, tzinfo=timezone.utc)
    summary = summarize_orders([order(ts, "8.00", item(None, "Old Special", 1, "8.00"))])
    assert summary.top_products[0].product_id is None
    assert summary.top_products[0].product_name == "Old Special"


def test_top_products_are_capped_at_five():
    ts = datetime(2026, 5, 1, tzinfo=timezone.utc)
    items = [item(uuid.uuid4(), f"Dish {n}", 1, f"{n}.00") for n in range(1, 8)]
    summary = summarize_orders([order(ts, "28.00", *items)])

    assert [p.product_name for p in summary.top_products] == ["Dish 7", "Dish 6", "Dish 5", "Dish 4", "Dish 3"]


async def test_sales_report_counts_only_completed_orders(client, auth, create_product, create_order):
    dosa = await create_product("Dosa", "10.00")
    done = await create_order([(dosa, 3)], tax_rate="0")
    await create_order([(dosa, 1)], tax_rate="0")

    for step in ("preparing", "ready", "completed"):
        resp = await client.patch(f"/orders/{done['id']}/status", json={"status": step}, headers=auth)
        assert resp.status_code == 200, resp.text

    resp = await client.get("/reports/sales", params={"period": "month"}, headers=auth)
    assert resp.status_code == 200
    body = resp.json()
    assert body["period"] == "month"
    assert body["total_orders"] == 1
    assert body["total_revenue"] == "30.00"
    assert body["top_products"][0]["product_name"] == "Dosa"
    assert body["top_products"][0]["total_quantity"] == 3


async def test_sales_report_rejects_unknown_period(client, auth):
    resp = await client.get("/reports/sales", params={"period": "decade"}, headers=auth)
    assert resp.status_code == 422


async def test_dashboard(client, auth, other_auth, create_product, create_order):
    dosa = await create_product("Dosa", "10.00")
    await create_product("Vada", "4.00", is_available=False)
    await create_order([(dosa, 1)], tax_rate="0")
    await create_order([(dosa, 2)], tax_rate="0")

    resp = await client.get("/reports/dashboard", headers=auth)
    assert resp.status_code == 200
    body = resp.json()
    assert body["today_orders"] == 2
    assert body["today_revenue"] == "30.00"
    assert body["available_products"] == 1
    assert len(body["recent_orders"]) == 2

    resp = await client.get("/reports/dashboard", headers=other_auth)
    assert resp.json()["today_orders"] == 0
    assert resp.json()["recent_orders"] == []
