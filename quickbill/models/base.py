import uuid
from datetime import datetime, timezone
from typing import Annotated

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


uuidpk = Annotated[
    uuid.UUID,
    mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
]

owner_id = Annotated[
    uuid.UUID,
    mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
]

created_ts = Annotated[
    datetime,
    mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now()
    )
]

updated_ts = Annotated[
    datetime,
    mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now()
    )
]
