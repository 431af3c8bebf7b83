from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quickbill.models.base import Base, created_ts, owner_id, updated_ts, uuidpk


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuidpk]
    user_id: Mapped[owner_id]
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    preparation_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[created_ts]
    updated_at: Mapped[updated_ts]
