from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel

from quickbill.service.order_status import OrderStatus


class ReceiptLine(BaseModel):
    name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class Receipt(BaseModel):
    business_name: str
    order_id: UUID
    order_number: str
    customer_name: str | None
    table_number: str | None
    status: OrderStatus
    created_at: datetime
    lines: List[ReceiptLine]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    package_charge: Decimal
    total: Decimal
    notes: str | None
    currency_symbol: str
