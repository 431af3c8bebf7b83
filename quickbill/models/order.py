from decimal import Decimal
from typing import List

from sqlalchemy import Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickbill.models.base import Base, created_ts, owner_id, updated_ts, uuidpk
from quickbill.service.order_status import OrderStatus


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuidpk]
    user_id: Mapped[owner_id]
    customer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    table_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    package_charge: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=OrderStatus.PENDING.value, nullable=False, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[created_ts]
    updated_at: Mapped[updated_ts]

    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.line_no",
    )
