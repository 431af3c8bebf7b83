from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from quickbill.service.order_status import OrderStatus


class ReportPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ProductSales(BaseModel):
    product_id: UUID | None
    product_name: str
    total_quantity: int
    total_revenue: Decimal


class DailyStat(BaseModel):
    date: dt.date
    revenue: Decimal
    orders: int


class SalesSummary(BaseModel):
    total_revenue: Decimal
    total_orders: int
    average_order: Decimal
    top_products: List[ProductSales]
    daily_stats: List[DailyStat]


class SalesReport(SalesSummary):
    period: ReportPeriod
    start_date: dt.datetime


class RecentOrder(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_name: str | None
    table_number: str | None
    total_amount: Decimal
    status: OrderStatus
    created_at: dt.datetime


class Dashboard(BaseModel):
    today_revenue: Decimal
    today_orders: int
    available_products: int
    recent_orders: List[RecentOrder]
