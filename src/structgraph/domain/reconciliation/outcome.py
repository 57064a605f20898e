"""Per-entity and per-batch reconciliation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from structgraph.domain.model import OutcomeKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structgraph.domain.model import EntityKind

    from .diff import AttributeChange


@dataclass(frozen=True, slots=True, kw_only=True)
class UpsertOutcome:
    kind: OutcomeKind
    entity_id: str
    entity_kind: EntityKind | None
    operation_id: str
    changes: Mapping[str, AttributeChange] = field(default_factory=dict)
    reason: str | None = None
    elapsed_ms: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def succeeded(self) -> bool:
        return self.kind in (OutcomeKind.INSERT, OutcomeKind.UPDATE, OutcomeKind.SKIP)


@dataclass(slots=True, kw_only=True)
class ReconciliationReport:
    """Everything one transaction did, or why it did nothing."""

    operation_id: str
    outcomes: list[UpsertOutcome] = field(default_factory=list)
    edges_added: int = 0
    edges_existing: int = 0
    edges_dropped: int = 0
    committed: bool = True
    error: str | None = None

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for outcome in self.outcomes if outcome.kind is kind)

    def outcome_for(self, entity_id: str) -> UpsertOutcome | None:
        return next((o for o in self.outcomes if o.entity_id == entity_id), None)
