from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileIn(BaseModel):
    business_name: str | None = Field(default=None, max_length=200)
    contact_info: Dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    business_name: str | None = None
    contact_info: Dict[str, Any] | None = None
