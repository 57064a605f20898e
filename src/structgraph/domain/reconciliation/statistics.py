"""Thread-safe running counters for the upsert engine."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from structgraph.domain.model import OutcomeKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .outcome import UpsertOutcome


@dataclass(frozen=True, slots=True)
class StatisticsSnapshot:
    inserts: int = 0
    updates: int = 0
    skips: int = 0
    conflicts: int = 0
    errors: int = 0
    total_time_ms: float = 0.0

    @property
    def total_operations(self) -> int:
        return self.inserts + self.updates + self.skips + self.conflicts + self.errors

    @property
    def average_time_ms(self) -> float:
        total = self.total_operations
        return self.total_time_ms / total if total else 0.0

    def as_dict(self) -> dict[str, float | int]:
        return {
            "inserts": self.inserts,
            "updates": self.updates,
            "skips": self.skips,
            "conflicts": self.conflicts,
            "errors": self.errors,
            "total_operations": self.total_operations,
            "total_time_ms": self.total_time_ms,
            "average_time_ms": self.average_time_ms,
        }


class UpsertStatistics:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[OutcomeKind, int] = dict.fromkeys(OutcomeKind, 0)
        self._total_time_ms = 0.0

    def record(self, outcomes: Iterable[UpsertOutcome]) -> None:
        with self._lock:
            for outcome in outcomes:
                self._counts[outcome.kind] += 1
                self._total_time_ms += outcome.elapsed_ms

    def snapshot(self) -> StatisticsSnapshot:
        with self._lock:
            return StatisticsSnapshot(
                inserts=self._counts[OutcomeKind.INSERT],
                updates=self._counts[OutcomeKind.UPDATE],
                skips=self._counts[OutcomeKind.SKIP],
                conflicts=self._counts[OutcomeKind.CONFLICT],
                errors=self._counts[OutcomeKind.FAILURE],
                total_time_ms=self._total_time_ms,
            )

    def reset(self) -> None:
        with self._lock:
            self._counts = dict.fromkeys(OutcomeKind, 0)
            self._total_time_ms = 0.0
