"""SQLAlchemy Core metadata for persisted overlay state."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Float,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

validation_status_table = Table(
    "validation_status",
    metadata,
    Column("logical_key", String(64), primary_key=True),
    Column("is_override", Boolean, nullable=False, default=False),
    Column("is_validated", Boolean, nullable=False, default=False),
    Column("is_na", Boolean, nullable=False, default=False),
    Column("is_flagged", Boolean, nullable=False, default=False),
    Column("comments", Text, nullable=True),
    Column("original_value", Float, nullable=False, default=0.0),
    Column("current_value", Float, nullable=False, default=0.0),
    Column("last_modified", UTCDateTime(), nullable=False),
)
