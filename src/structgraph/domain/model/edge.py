"""Typed, directed dependency edges between entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import EdgeType, UsageKind

if TYPE_CHECKING:
    from collections.abc import Mapping

type EdgeKey = tuple[str, str, EdgeType, str, str]


@dataclass(frozen=True, slots=True, kw_only=True)
class UsageMetadata:
    """Why and where a ``USES`` edge was observed."""

    usage_kind: UsageKind
    context: str
    qualified_name: str | None = None
    is_external: bool = False
    extra: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    from_id: str
    to_id: str
    edge_type: EdgeType
    metadata: UsageMetadata | None = None

    @property
    def usage_kind(self) -> str:
        return self.metadata.usage_kind.value if self.metadata else ""

    @property
    def context(self) -> str:
        return self.metadata.context if self.metadata else ""

    @property
    def key(self) -> EdgeKey:
        """Deduplication key; one stored edge per key."""

        return (self.from_id, self.to_id, self.edge_type, self.usage_kind, self.context)
