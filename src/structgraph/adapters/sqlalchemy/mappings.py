"""SQLAlchemy table metadata for the code graph."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
)

from structgraph.domain.model import EdgeType, EntityKind, OutcomeKind

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


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

# Core tables -----------------------------------------------------------------

entity_table = Table(
    "entity",
    metadata,
    Column("id", String, primary_key=True),
    Column("kind", Enum(EntityKind, native_enum=False), nullable=False),
    Column("attributes", JSON, nullable=False, default=dict),
    Column("provisional", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime, nullable=True),
    Column("updated_at", UTCDateTime, nullable=True),
    UniqueConstraint("kind", "id"),
)

dependency_edge_table = Table(
    "dependency_edge",
    metadata,
    Column("row_id", Integer, primary_key=True, autoincrement=True),
    Column("from_id", String, nullable=False),
    Column("to_id", String, nullable=False),
    Column("edge_type", Enum(EdgeType, native_enum=False), nullable=False),
    # empty strings rather than NULL so the key constraint also covers untyped edges
    Column("usage_kind", String, nullable=False, default=""),
    Column("context", String, nullable=False, default=""),
    Column("qualified_name", String, nullable=True),
    Column("is_external", Boolean, nullable=False, default=False),
    Column("extra", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime, nullable=True),
    UniqueConstraint("from_id", "to_id", "edge_type", "usage_kind", "context"),
    Index("ix_dependency_edge_from_id", "from_id"),
    Index("ix_dependency_edge_to_id", "to_id"),
)

upsert_audit_table = Table(
    "upsert_audit",
    metadata,
    Column("row_id", Integer, primary_key=True, autoincrement=True),
    Column("id", String, nullable=False),
    Column("operation_id", String, nullable=False),
    Column("outcome", Enum(OutcomeKind, native_enum=False), nullable=False),
    Column("entity_kind", Enum(EntityKind, native_enum=False), nullable=True),
    Column("entity_id", String, nullable=False),
    Column("old_values", JSON, nullable=False, default=dict),
    Column("new_values", JSON, nullable=False, default=dict),
    Column("reason", String, nullable=True),
    Column("elapsed_ms", Float, nullable=False, default=0.0),
    Column("source", String, nullable=False),
    Column("timestamp", UTCDateTime, nullable=False),
    Index("ix_upsert_audit_operation_id", "operation_id"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the graph metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
