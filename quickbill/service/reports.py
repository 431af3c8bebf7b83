from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickbill.models.order import Order
from quickbill.models.product import Product
from quickbill.schemas.report import (
    DailyStat,
    Dashboard,
    ProductSales,
    RecentOrder,
    ReportPeriod,
    SalesReport,
    SalesSummary,
)
from quickbill.service.order_status import OrderStatus
from quickbill.service.pricing import ZERO, to_money

PERIOD_DAYS = {
    ReportPeriod.WEEK: 7,
    ReportPeriod.MONTH: 30,
    ReportPeriod.YEAR: 365,
}

TOP_PRODUCTS = 5
RECENT_ORDERS = 5


def _utc_date(ts: datetime) -> date:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date()


def period_start(period: ReportPeriod, now: datetime) -> datetime:
    return now - timedelta(days=PERIOD_DAYS[period])


def summarize_orders(orders: Iterable[Order]) -> SalesSummary:
    """Revenue, top sellers and per-day totals over already-fetched orders."""
    total_revenue = ZERO
    total_orders = 0
    products: dict = {}
    daily: dict[date, list] = defaultdict(lambda: [ZERO, 0])

    for order in orders:
        amount = Decimal(order.total_amount)
        total_revenue += amount
        total_orders += 1

        day = daily[_utc_date(order.created_at)]
        day[0] += amount
        day[1] += 1

        for item in order.items:
            key = item.product_id or item.product_name
            stat = products.get(key)
            if stat is None:
                stat = products[key] = {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": 0,
                    "revenue": ZERO,
                }
            stat["quantity"] += item.quantity
            stat["revenue"] += Decimal(item.subtotal)

    top = sorted(products.values(), key=lambda s: s["revenue"], reverse=True)[:TOP_PRODUCTS]
    average = total_revenue / total_orders if total_orders else ZERO

    return SalesSummary(
        total_revenue=to_money(total_revenue),
        total_orders=total_orders,
        average_order=to_money(average),
        top_products=[
            ProductSales(
                product_id=s["product_id"],
                product_name=s["product_name"],
                total_quantity=s["quantity"],
                total_revenue=to_money(s["revenue"]),
            )
            for s in top
        ],
        daily_stats=[
            DailyStat(date=d, revenue=to_money(v[0]), orders=v[1])
            for d, v in sorted(daily.items())
        ],
    )


async def get_sales_report(
    db: AsyncSession,
    user_id: UUID,
    period: ReportPeriod,
    now: datetime | None = None,
) -> SalesReport:
    now = now or datetime.now(timezone.utc)
    start = period_start(period, now)
    logger.info(
        "Building sales report for user_id='{user_id}', period='{period}', since={start}",
        user_id=str(user_id),
        period=period.value,
        start=start.isoformat(),
    )
    res = await db.execute(
        select(Order)
        .options(selectinload(Order.items))
        .where(
            Order.user_id == user_id,
            Order.status == OrderStatus.COMPLETED.value,
            Order.created_at >= start,
        )
    )
    orders = res.scalars().all()
    summary = summarize_orders(orders)
    return SalesReport(period=period, start_date=start, **summary.model_dump())


async def get_dashboard(db: AsyncSession, user_id: UUID, now: datetime | None = None) -> Dashboard:
    now = now or datetime.now(timezone.utc)
    day_start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    day_end = day_start + timedelta(days=1)

    today = await db.execute(
        select(func.count(Order.id), func.coalesce(func.sum(Order.total_amount), 0)).where(
            Order.user_id == user_id,
            Order.created_at >= day_start,
            Order.created_at < day_end,
        )
    )
    today_orders, today_revenue = today.one()

    available_products = await db.scalar(
        select(func.count(Product.id)).where(
            Product.user_id == user_id,
            Product.is_available == True,  # noqa: E712
        )
    )

    recent = await db.execute(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
        .limit(RECENT_ORDERS)
    )
    logger.info(
        "Dashboard computed for user_id='{user_id}': today_orders={orders}",
        user_id=str(user_id),
        orders=today_orders,
    )
    return Dashboard(
        today_revenue=to_money(today_revenue),
        today_orders=today_orders,
        available_products=available_products or 0,
        recent_orders=[RecentOrder.model_validate(o) for o in recent.scalars().all()],
    )
