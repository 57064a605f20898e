"""Ports for persisting the code graph."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from structgraph.domain.model import AuditRecord, CodeEntity, DependencyEdge, EdgeKey


class TransactionFailure(RuntimeError):
    """Raised by a store when the current transaction cannot continue."""


class ConstraintViolation(TransactionFailure):
    """Raised when a write breaks a uniqueness constraint, e.g. a duplicate id."""


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class EntityRepository(Repository["CodeEntity"], Protocol):
    """Entities keyed by their (globally unique) identifier."""

    def get(self, entity_id: str) -> CodeEntity | None: ...

    def update(self, entity: CodeEntity) -> None: ...


@runtime_checkable
class EdgeRepository(Repository["DependencyEdge"], Protocol):
    def exists(self, key: EdgeKey) -> bool: ...


@runtime_checkable
class AuditRepository(Repository["AuditRecord"], Protocol):
    def for_operation(self, operation_id: str) -> list[AuditRecord]: ...
