from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: str | None = Field(default=None, max_length=100)
    is_available: bool = True
    preparation_time: int | None = Field(default=None, ge=0)


class ProductCreate(ProductBase):
    model_config = ConfigDict(extra="forbid")


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: str | None = Field(default=None, max_length=100)
    is_available: bool | None = None
    preparation_time: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class ProductRead(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime
