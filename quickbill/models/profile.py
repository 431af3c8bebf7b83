import uuid

from sqlalchemy import JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from quickbill.models.base import Base, created_ts, updated_ts, uuidpk


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuidpk]
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, unique=True)
    business_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    contact_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[created_ts]
    updated_at: Mapped[updated_ts]
