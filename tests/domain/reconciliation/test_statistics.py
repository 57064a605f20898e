from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from structgraph.domain.identity import class_id
from structgraph.domain.model import EntityKind, OutcomeKind
from structgraph.domain.reconciliation import StatisticsSnapshot, UpsertOutcome, UpsertStatistics

WORKERS = 8
RECORDS_PER_WORKER = 2000


def _outcome(kind: OutcomeKind) -> UpsertOutcome:
    return UpsertOutcome(
        kind=kind,
        entity_id=class_id("com.example", "UserService"),
        entity_kind=EntityKind.CLASS,
        operation_id="upsert_stats",
        elapsed_ms=0.5,
    )


def test_concurrent_records_are_all_counted() -> None:
    statistics = UpsertStatistics()
    insert = _outcome(OutcomeKind.INSERT)
    skip = _outcome(OutcomeKind.SKIP)

    def worker() -> None:
        for _ in range(RECORDS_PER_WORKER):
            statistics.record([insert, skip])

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [pool.submit(worker) for _ in range(WORKERS)]
    for future in futures:
        future.result()

    snapshot = statistics.snapshot()
    expected = WORKERS * RECORDS_PER_WORKER

    assert snapshot.inserts == expected
    assert snapshot.skips == expected
    assert snapshot.total_operations == 2 * expected
    assert snapshot.total_time_ms == 2 * expected * 0.5
    assert snapshot.average_time_ms == 0.5


def test_reset_clears_counts() -> None:
    statistics = UpsertStatistics()
    statistics.record([_outcome(OutcomeKind.CONFLICT), _outcome(OutcomeKind.FAILURE)])

    assert (statistics.snapshot().conflicts, statistics.snapshot().errors) == (1, 1)

    statistics.reset()

    assert statistics.snapshot() == StatisticsSnapshot()
