"""SQLAlchemy adapter package for structgraph."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    dependency_edge_table,
    entity_table,
    metadata,
    upsert_audit_table,
)
from .repositories import (
    SqlAlchemyAuditRepository,
    SqlAlchemyEdgeRepository,
    SqlAlchemyEntityRepository,
    translate_store_errors,
)
from .unit_of_work import (
    SqlAlchemyGraphUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAuditRepository",
    "SqlAlchemyEdgeRepository",
    "SqlAlchemyEntityRepository",
    "SqlAlchemyGraphUnitOfWork",
    "StartupError",
    "create_all_tables",
    "dependency_edge_table",
    "entity_table",
    "metadata",
    "shutdown",
    "startup",
    "translate_store_errors",
    "upsert_audit_table",
]
