"""Reconciliation of classified entities and edges with the persisted graph."""

from __future__ import annotations

from .diff import (
    AttributeChange,
    EntityComparison,
    compare_attributes,
    compare_entities,
    compare_values,
    is_ephemeral,
)
from .engine import UnitOfWorkFactory, UpsertEngine, new_operation_id
from .outcome import ReconciliationReport, UpsertOutcome
from .statistics import StatisticsSnapshot, UpsertStatistics

__all__ = [
    "AttributeChange",
    "EntityComparison",
    "ReconciliationReport",
    "StatisticsSnapshot",
    "UnitOfWorkFactory",
    "UpsertEngine",
    "UpsertOutcome",
    "UpsertStatistics",
    "compare_attributes",
    "compare_entities",
    "compare_values",
    "is_ephemeral",
    "new_operation_id",
]
