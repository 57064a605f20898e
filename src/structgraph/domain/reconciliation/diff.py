"""Attribute-level comparison of a stored entity with an incoming one.

Comparison works on the explicit attribute maps entities expose
(``CodeEntity.snapshot``). Rules per attribute:

- both absent: no change
- absent -> value: ``ADDED``
- value -> absent: ``REMOVED``
- values of different types: ``TYPE_CHANGED`` (a conflict when significant)
- different values: ``MODIFIED``

Changes to attributes whose name contains an ephemeral marker (timestamps)
are recorded but never significant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from structgraph.config.reconciliation import DEFAULT_EPHEMERAL_MARKERS
from structgraph.domain.model import ChangeType

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from structgraph.domain.model import AttributeValue, CodeEntity


@dataclass(frozen=True, slots=True)
class AttributeChange:
    name: str
    change_type: ChangeType
    old_value: AttributeValue
    new_value: AttributeValue
    significant: bool = True


@dataclass(slots=True, kw_only=True)
class EntityComparison:
    changes: dict[str, AttributeChange] = field(default_factory=dict)
    conflict: str | None = None

    @property
    def significant_changes(self) -> dict[str, AttributeChange]:
        return {name: change for name, change in self.changes.items() if change.significant}

    @property
    def has_significant_changes(self) -> bool:
        return any(change.significant for change in self.changes.values())

    @property
    def is_conflict(self) -> bool:
        return self.conflict is not None


def is_ephemeral(name: str, markers: Sequence[str] = DEFAULT_EPHEMERAL_MARKERS) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in markers)


def compare_values(
    name: str,
    old_value: AttributeValue,
    new_value: AttributeValue,
    *,
    markers: Sequence[str] = DEFAULT_EPHEMERAL_MARKERS,
) -> AttributeChange | None:
    if old_value is None and new_value is None:
        return None
    significant = not is_ephemeral(name, markers)
    if old_value is None:
        return AttributeChange(name, ChangeType.ADDED, old_value, new_value, significant)
    if new_value is None:
        return AttributeChange(name, ChangeType.REMOVED, old_value, new_value, significant)
    if type(old_value) is not type(new_value):
        return AttributeChange(name, ChangeType.TYPE_CHANGED, old_value, new_value, significant)
    if old_value != new_value:
        return AttributeChange(name, ChangeType.MODIFIED, old_value, new_value, significant)
    return None


def compare_attributes(
    stored: Mapping[str, AttributeValue],
    incoming: Mapping[str, AttributeValue],
    *,
    markers: Sequence[str] = DEFAULT_EPHEMERAL_MARKERS,
) -> EntityComparison:
    comparison = EntityComparison()
    for name in dict.fromkeys([*stored, *incoming]):
        change = compare_values(name, stored.get(name), incoming.get(name), markers=markers)
        if change is None:
            continue
        comparison.changes[name] = change
        if change.change_type is ChangeType.TYPE_CHANGED and change.significant:
            comparison.conflict = (
                f"attribute {name!r} changed type from {type(change.old_value).__name__} "
                f"to {type(change.new_value).__name__}"
            )
    return comparison


def compare_entities(
    stored: CodeEntity,
    incoming: CodeEntity,
    *,
    markers: Sequence[str] = DEFAULT_EPHEMERAL_MARKERS,
) -> EntityComparison:
    """Diff two entities that share an identifier."""

    if stored.kind is not incoming.kind:
        return EntityComparison(
            conflict=f"stored entity is a {stored.kind}, incoming entity is a {incoming.kind}"
        )
    return compare_attributes(stored.snapshot(), incoming.snapshot(), markers=markers)
