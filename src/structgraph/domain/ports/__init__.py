"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    AuditRepository,
    ConstraintViolation,
    EdgeRepository,
    EntityRepository,
    Repository,
    TransactionFailure,
)
from .unit_of_work import (
    GraphRepositories,
    GraphUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AuditRepository",
    "ConstraintViolation",
    "EdgeRepository",
    "EntityRepository",
    "GraphRepositories",
    "GraphUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "TransactionFailure",
    "UnitOfWork",
]
