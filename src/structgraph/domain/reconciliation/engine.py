"""Transactional upsert of entities and edges into the graph store.

Per entity the engine walks a small state machine::

    LOOKUP -> NOT_FOUND -> CREATE                 -> INSERT
    LOOKUP -> FOUND     -> DIFF -> identical      -> SKIP
                                -> changed        -> APPLY -> UPDATE
                                -> incompatible   -> CONFLICT

Problems local to one entity (malformed identifier, mode violation, type
conflict) become outcomes and never abort the surrounding batch. A store
failure does: the transaction is rolled back and every outcome of the batch
is reported as ``FAILURE``.
"""

from __future__ import annotations

import time
import uuid
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from structgraph.config.reconciliation import ReconciliationConfig
from structgraph.domain.identity import audit_id, check_operation_id, validate_id
from structgraph.domain.model import (
    LIFECYCLE_ATTRIBUTES,
    AuditRecord,
    OutcomeKind,
    UpsertMode,
)
from structgraph.domain.ports import TransactionFailure

from .diff import compare_entities
from .outcome import ReconciliationReport, UpsertOutcome
from .statistics import StatisticsSnapshot, UpsertStatistics

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from structgraph.domain.classification import ClassificationResult
    from structgraph.domain.model import (
        AttributeValue,
        CodeEntity,
        DependencyEdge,
    )
    from structgraph.domain.ports import (
        EdgeRepository,
        EntityRepository,
        GraphUnitOfWork,
    )

    from .diff import AttributeChange

type UnitOfWorkFactory = Callable[[], GraphUnitOfWork]

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def new_operation_id() -> str:
    return f"upsert_{uuid.uuid4().hex}"


class UpsertEngine:
    """Reconcile incoming entities and edges against the persisted graph."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        config: ReconciliationConfig | None = None,
        operation_id: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self.config = config or ReconciliationConfig()
        self._operation_id = check_operation_id(operation_id or new_operation_id())
        self._clock = clock
        self._statistics = UpsertStatistics()

    @property
    def operation_id(self) -> str:
        return self._operation_id

    @operation_id.setter
    def operation_id(self, value: str) -> None:
        self._operation_id = check_operation_id(value)

    # public operations ----------------------------------------------------------

    def upsert(self, entity: CodeEntity) -> UpsertOutcome:
        return self.upsert_batch([entity])[0]

    def upsert_batch(self, entities: Sequence[CodeEntity]) -> list[UpsertOutcome]:
        """Upsert ``entities`` in order inside one transaction."""

        return self._run(list(entities), []).outcomes

    def reconcile(self, result: ClassificationResult) -> ReconciliationReport:
        """Upsert a classification result: entities first, then edges."""

        return self._run(list(result.entities), list(result.edges))

    def statistics(self) -> StatisticsSnapshot:
        return self._statistics.snapshot()

    def reset_statistics(self) -> None:
        self._statistics.reset()
        log.info("Upsert statistics reset for operation %s", self._operation_id)

    # transaction ----------------------------------------------------------------

    def _run(
        self,
        entities: list[CodeEntity],
        edges: list[DependencyEdge],
    ) -> ReconciliationReport:
        report = ReconciliationReport(operation_id=self._operation_id)
        pending_audit: list[AuditRecord] = []

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            try:
                for entity in entities:
                    report.outcomes.append(
                        self._upsert_one(repositories.entities, entity, pending_audit)
                    )
                failed_ids = {
                    outcome.entity_id
                    for outcome in report.outcomes
                    if outcome.kind is OutcomeKind.FAILURE
                }
                self._reconcile_edges(repositories.edges, edges, failed_ids, report)
                if self.config.audit_enabled:
                    for record in pending_audit:
                        repositories.audit.add(record)
                uow.commit()
            except TransactionFailure as exc:
                uow.rollback()
                report = self._failed_report(entities, len(report.outcomes), exc)

        self._statistics.record(report.outcomes)
        log.info(
            "Operation %s: %d inserted, %d updated, %d skipped, %d conflicts, %d failed, "
            "%d edges added%s",
            self._operation_id,
            report.count(OutcomeKind.INSERT),
            report.count(OutcomeKind.UPDATE),
            report.count(OutcomeKind.SKIP),
            report.count(OutcomeKind.CONFLICT),
            report.count(OutcomeKind.FAILURE),
            report.edges_added,
            "" if report.committed else " (rolled back)",
        )
        return report

    def _failed_report(
        self,
        entities: list[CodeEntity],
        attempted: int,
        exc: TransactionFailure,
    ) -> ReconciliationReport:
        log.warning(
            "Operation %s rolled back after %d of %d entities: %s",
            self._operation_id,
            attempted,
            len(entities),
            exc,
        )
        outcomes: list[UpsertOutcome] = []
        for index, entity in enumerate(entities):
            if index < attempted:
                reason = f"rolled back: {exc}"
            elif index == attempted:
                reason = str(exc)
            else:
                reason = f"not attempted: {exc}"
            outcomes.append(self._outcome(OutcomeKind.FAILURE, entity, reason=reason))
        return ReconciliationReport(
            operation_id=self._operation_id,
            outcomes=outcomes,
            committed=False,
            error=str(exc),
        )

    # entities -------------------------------------------------------------------

    def _upsert_one(
        self,
        repository: EntityRepository,
        entity: CodeEntity,
        pending_audit: list[AuditRecord],
    ) -> UpsertOutcome:
        started = time.perf_counter()
        outcome, old_values, new_values = self._decide(repository, entity, started)
        if outcome.kind is not OutcomeKind.SKIP:
            pending_audit.append(self._audit_record(outcome, old_values, new_values))
        log.debug("%s %s: %s", outcome.kind, entity.id, outcome.reason or "ok")
        return outcome

    def _decide(
        self,
        repository: EntityRepository,
        entity: CodeEntity,
        started: float,
    ) -> tuple[UpsertOutcome, Mapping[str, AttributeValue], Mapping[str, AttributeValue]]:
        mode = self.config.mode
        if not validate_id(entity.id, entity.kind):
            reason = f"invalid {entity.kind} identifier: {entity.id!r}"
            return self._outcome(OutcomeKind.FAILURE, entity, started, reason=reason), {}, {}

        stored = repository.get(entity.id)
        if stored is None:
            if mode is UpsertMode.UPDATE_ONLY:
                reason = "entity does not exist and mode is update_only"
                return self._outcome(OutcomeKind.FAILURE, entity, started, reason=reason), {}, {}
            now = self._clock()
            entity.created_at = entity.created_at or now
            entity.updated_at = now
            repository.add(entity)
            inserted = self._outcome(OutcomeKind.INSERT, entity, started)
            return inserted, {}, entity.attributes()

        if mode is UpsertMode.INSERT_ONLY:
            reason = "entity already exists and mode is insert_only"
            return self._outcome(OutcomeKind.FAILURE, entity, started, reason=reason), {}, {}

        if entity.provisional and not stored.provisional:
            reason = "placeholder does not replace a declaration"
            return self._outcome(OutcomeKind.SKIP, entity, started, reason=reason), {}, {}

        comparison = compare_entities(stored, entity, markers=self.config.ephemeral_markers)
        if comparison.conflict is not None:
            conflict = self._outcome(
                OutcomeKind.CONFLICT,
                entity,
                started,
                changes=comparison.changes,
                reason=comparison.conflict,
            )
            return conflict, {}, {}

        promoted = stored.provisional and not entity.provisional
        if not comparison.has_significant_changes and not promoted:
            return self._outcome(OutcomeKind.SKIP, entity, started), {}, {}

        applied = {
            name: change.new_value
            for name, change in comparison.changes.items()
            if name not in LIFECYCLE_ATTRIBUTES
        }
        old_values = {
            name: change.old_value
            for name, change in comparison.changes.items()
            if name not in LIFECYCLE_ATTRIBUTES
        }
        stored.apply_attributes(applied)
        stored.provisional = stored.provisional and entity.provisional
        stored.updated_at = self._clock()
        repository.update(stored)
        updated = self._outcome(
            OutcomeKind.UPDATE,
            entity,
            started,
            changes=comparison.significant_changes,
            reason="declaration replaces placeholder" if promoted else None,
        )
        return updated, old_values, applied

    def _outcome(
        self,
        kind: OutcomeKind,
        entity: CodeEntity,
        started: float | None = None,
        *,
        changes: Mapping[str, AttributeChange] | None = None,
        reason: str | None = None,
    ) -> UpsertOutcome:
        elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        return UpsertOutcome(
            kind=kind,
            entity_id=entity.id,
            entity_kind=entity.kind,
            operation_id=self._operation_id,
            changes=dict(changes or {}),
            reason=reason,
            elapsed_ms=elapsed_ms,
            timestamp=self._clock(),
        )

    def _audit_record(
        self,
        outcome: UpsertOutcome,
        old_values: Mapping[str, AttributeValue],
        new_values: Mapping[str, AttributeValue],
    ) -> AuditRecord:
        return AuditRecord(
            id=audit_id(self._operation_id, outcome.entity_id or "unknown", outcome.timestamp),
            operation_id=self._operation_id,
            outcome=outcome.kind,
            entity_kind=outcome.entity_kind,
            entity_id=outcome.entity_id,
            old_values=dict(old_values),
            new_values=dict(new_values),
            reason=outcome.reason,
            elapsed_ms=outcome.elapsed_ms,
            timestamp=outcome.timestamp,
        )

    # edges ----------------------------------------------------------------------

    def _reconcile_edges(
        self,
        repository: EdgeRepository,
        edges: Iterable[DependencyEdge],
        failed_ids: set[str],
        report: ReconciliationReport,
    ) -> None:
        for edge in edges:
            if edge.from_id in failed_ids or edge.to_id in failed_ids:
                report.edges_dropped += 1
                continue
            if repository.exists(edge.key):
                report.edges_existing += 1
                continue
            repository.add(edge)
            report.edges_added += 1
