from datetime import UTC, datetime
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy_utils import UUIDType

BaseModel = declarative_base()


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to timestamps read back without a zone (sqlite drops it)."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class Base(BaseModel):
    __abstract__ = True

    type_annotation_map = {
        UUID: UUIDType,
    }

    uuid: Mapped[UUID] = mapped_column(UUIDType, primary_key=True, default=uuid4)


class TimeStamp(BaseModel):
    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=utcnow,
        server_default=sa.func.current_timestamp(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=utcnow,
        server_default=sa.func.current_timestamp(),
        onupdate=utcnow,
        nullable=False,
    )
