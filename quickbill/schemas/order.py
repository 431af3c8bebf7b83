from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from quickbill.service.order_status import OrderStatus, allowed_transitions


class OrderItemIn(BaseModel):
    product_id: UUID
    quantity: int = Field(gt=0)


class QuoteRequest(BaseModel):
    items: List[OrderItemIn] = []
    tax_rate: Decimal | None = Field(default=None, ge=0, le=100, decimal_places=2)
    package_charge: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)

    model_config = ConfigDict(extra="forbid")


class OrderCreate(QuoteRequest):
    customer_name: str | None = Field(default=None, max_length=200)
    table_number: str | None = Field(default=None, max_length=50)
    notes: str | None = None


class OrderStatusPatch(BaseModel):
    status: OrderStatus


class QuoteLine(BaseModel):
    product_id: UUID
    name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class QuoteOut(BaseModel):
    lines: List[QuoteLine]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    package_charge: Decimal
    total: Decimal


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID | None
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    notes: str | None = None


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    customer_name: str | None
    table_number: str | None
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    package_charge: Decimal
    total_amount: Decimal
    status: OrderStatus
    notes: str | None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]

    @computed_field
    @property
    def next_statuses(self) -> List[OrderStatus]:
        return sorted(allowed_transitions(self.status), key=lambda s: list(OrderStatus).index(s))
