"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from structgraph.adapters.sqlalchemy.mappings import (
    dependency_edge_table,
    entity_table,
    upsert_audit_table,
)
from structgraph.domain.model import (
    AuditRecord,
    DependencyEdge,
    UsageKind,
    UsageMetadata,
    restore_entity,
)
from structgraph.domain.ports import ConstraintViolation, TransactionFailure

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.orm import Session

    from structgraph.domain.model import CodeEntity, EdgeKey, EntityKind


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Re-raise driver errors as the store errors the domain understands."""

    try:
        yield
    except IntegrityError as exc:
        raise ConstraintViolation(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        raise TransactionFailure(str(exc)) from exc


def _entity_values(entity: CodeEntity) -> dict[str, Any]:
    return {
        "kind": entity.kind,
        "attributes": entity.attributes(),
        "provisional": entity.provisional,
        "created_at": entity.created_at,
        "updated_at": entity.updated_at,
    }


class SqlAlchemyEntityRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, entity_id: str) -> CodeEntity | None:
        stmt = select(entity_table).where(entity_table.c.id == entity_id)
        with translate_store_errors():
            row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return restore_entity(
            row.kind,
            entity_id=row.id,
            attributes=row.attributes or {},
            provisional=row.provisional,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def add(self, entity: CodeEntity) -> None:
        stmt = insert(entity_table).values(id=entity.id, **_entity_values(entity))
        with translate_store_errors():
            self.session.execute(stmt)

    def update(self, entity: CodeEntity) -> None:
        stmt = (
            update(entity_table)
            .where(entity_table.c.id == entity.id)
            .values(**_entity_values(entity))
        )
        with translate_store_errors():
            self.session.execute(stmt)

    def list_ids(self, kind: EntityKind | None = None) -> list[str]:
        stmt = select(entity_table.c.id).order_by(entity_table.c.id)
        if kind is not None:
            stmt = stmt.where(entity_table.c.kind == kind)
        with translate_store_errors():
            return list(self.session.execute(stmt).scalars())


class SqlAlchemyEdgeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(self, key: EdgeKey) -> bool:
        from_id, to_id, edge_type, usage_kind, context = key
        stmt = (
            select(dependency_edge_table.c.row_id)
            .where(dependency_edge_table.c.from_id == from_id)
            .where(dependency_edge_table.c.to_id == to_id)
            .where(dependency_edge_table.c.edge_type == edge_type)
            .where(dependency_edge_table.c.usage_kind == usage_kind)
            .where(dependency_edge_table.c.context == context)
            .limit(1)
        )
        with translate_store_errors():
            return self.session.execute(stmt).scalar_one_or_none() is not None

    def add(self, entity: DependencyEdge) -> None:
        metadata = entity.metadata
        stmt = insert(dependency_edge_table).values(
            from_id=entity.from_id,
            to_id=entity.to_id,
            edge_type=entity.edge_type,
            usage_kind=entity.usage_kind,
            context=entity.context,
            qualified_name=metadata.qualified_name if metadata else None,
            is_external=metadata.is_external if metadata else False,
            extra=dict(metadata.extra) if metadata else {},
            created_at=datetime.now(tz=UTC),
        )
        with translate_store_errors():
            self.session.execute(stmt)

    def outgoing(self, from_id: str) -> list[DependencyEdge]:
        stmt = (
            select(dependency_edge_table)
            .where(dependency_edge_table.c.from_id == from_id)
            .order_by(dependency_edge_table.c.row_id)
        )
        with translate_store_errors():
            rows = self.session.execute(stmt).all()
        edges: list[DependencyEdge] = []
        for row in rows:
            metadata = None
            if row.usage_kind:
                metadata = UsageMetadata(
                    usage_kind=UsageKind(row.usage_kind),
                    context=row.context,
                    qualified_name=row.qualified_name,
                    is_external=row.is_external,
                    extra=row.extra or {},
                )
            edges.append(DependencyEdge(row.from_id, row.to_id, row.edge_type, metadata))
        return edges


class SqlAlchemyAuditRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: AuditRecord) -> None:
        stmt = insert(upsert_audit_table).values(
            id=entity.id,
            operation_id=entity.operation_id,
            outcome=entity.outcome,
            entity_kind=entity.entity_kind,
            entity_id=entity.entity_id,
            old_values=dict(entity.old_values),
            new_values=dict(entity.new_values),
            reason=entity.reason,
            elapsed_ms=entity.elapsed_ms,
            source=entity.source,
            timestamp=entity.timestamp,
        )
        with translate_store_errors():
            self.session.execute(stmt)

    def for_operation(self, operation_id: str) -> list[AuditRecord]:
        stmt = (
            select(upsert_audit_table)
            .where(upsert_audit_table.c.operation_id == operation_id)
            .order_by(upsert_audit_table.c.row_id)
        )
        with translate_store_errors():
            rows = self.session.execute(stmt).all()
        return [
            AuditRecord(
                id=row.id,
                operation_id=row.operation_id,
                outcome=row.outcome,
                entity_kind=row.entity_kind,
                entity_id=row.entity_id,
                old_values=row.old_values or {},
                new_values=row.new_values or {},
                reason=row.reason,
                elapsed_ms=row.elapsed_ms,
                source=row.source,
                timestamp=row.timestamp,
            )
            for row in rows
        ]
