from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class PlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    price: Decimal
    features: List[str]
    is_active: bool

    @field_validator("features", mode="before")
    @classmethod
    def _features_as_strings(cls, v):
        if not isinstance(v, list):
            return []
        return [str(f) for f in v]


class UserSubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    plan_id: UUID
    status: str
    started_at: datetime
    expires_at: datetime
    plan: PlanOut
