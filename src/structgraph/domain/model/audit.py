"""Audit records for reconciliation decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .entity import AttributeValue
    from .enums import EntityKind, OutcomeKind


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditRecord:
    """One reconciliation decision, keyed by operation, entity and time."""

    id: str
    operation_id: str
    outcome: OutcomeKind
    entity_kind: EntityKind
    entity_id: str
    old_values: Mapping[str, AttributeValue] = field(default_factory=dict)
    new_values: Mapping[str, AttributeValue] = field(default_factory=dict)
    reason: str | None = None
    elapsed_ms: float = 0.0
    source: str = "structgraph"
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
