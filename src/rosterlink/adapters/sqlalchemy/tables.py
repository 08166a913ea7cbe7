"""SQLAlchemy Core tables for the member store and activity log."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Index,
    MetaData,
    String,
    Table,
    TypeDecorator,
    Uuid,
    func,
)

UUIDColumnType = Uuid[uuid.UUID]


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

team_member_table = Table(
    "organization_team_members",
    metadata,
    Column("id", String, primary_key=True),
    Column("organization_id", String, nullable=False),
    Column("first_name", String, nullable=False, server_default=""),
    Column("last_name", String, nullable=False, server_default=""),
    Column("punch_id", String, nullable=True),
    Column("email", String, nullable=True),
    Column("phone", String, nullable=True),
    Column("is_active", Boolean, nullable=False, server_default="1"),
    Column("external_id", String, nullable=True),
    Column("external_source", String, nullable=True),
    Column("external_data", JSON, nullable=True),
    Column("last_synced_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=True, server_default=func.now()),
    Index("ix_team_member_org_name", "organization_id", "last_name", "first_name"),
    Index("ix_team_member_external", "external_source", "external_id"),
)

activity_log_table = Table(
    "activity_log",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", String, nullable=False),
    Column("user_id", String, nullable=False),
    Column("activity_type", String, nullable=False),
    Column("details", JSON, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Index("ix_activity_log_org_created", "organization_id", "created_at"),
)
