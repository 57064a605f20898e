"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from structgraph.adapters.facts import FactDocumentReader
from structgraph.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGraphUnitOfWork,
    is_started,
    startup,
)
from structgraph.config import get_classification_config, get_reconciliation_config
from structgraph.domain.classification import (
    ClassificationResult,
    DependencyClassifier,
    ImportContext,
)
from structgraph.domain.model import EntityKind, OutcomeKind
from structgraph.domain.reconciliation import UpsertEngine

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from structgraph.domain.classification import SourceUnit
    from structgraph.domain.model import UpsertMode
    from structgraph.domain.reconciliation import ReconciliationReport, UnitOfWorkFactory

_SHARED_KINDS = frozenset({EntityKind.REPOSITORY, EntityKind.SUB_PROJECT})

log = getLogger(__name__)


@dataclass(slots=True)
class IngestionCache:
    """Repository and sub-project entities already reconciled during one run.

    Every unit of a repository carries the same repository facts; once they
    have been stored there is no need to diff them again for each file.
    """

    known_ids: set[str] = field(default_factory=set)

    def strip_known(self, result: ClassificationResult) -> ClassificationResult:
        entities = [
            entity
            for entity in result.entities
            if entity.kind not in _SHARED_KINDS or entity.id not in self.known_ids
        ]
        return ClassificationResult(entities=entities, edges=list(result.edges))

    def remember(self, result: ClassificationResult, report: ReconciliationReport) -> None:
        if not report.committed:
            return
        for entity in result.entities:
            if entity.kind not in _SHARED_KINDS:
                continue
            outcome = report.outcome_for(entity.id)
            if outcome is not None and outcome.succeeded:
                self.known_ids.add(entity.id)


@dataclass(slots=True)
class IngestionSummary:
    operation_id: str
    units: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    conflicts: int = 0
    failures: int = 0
    edges_added: int = 0
    rolled_back_units: int = 0
    invalid_documents: int = 0
    failed_units: list[str] = field(default_factory=list)

    def add(self, report: ReconciliationReport) -> None:
        self.inserted += report.count(OutcomeKind.INSERT)
        self.updated += report.count(OutcomeKind.UPDATE)
        self.skipped += report.count(OutcomeKind.SKIP)
        self.conflicts += report.count(OutcomeKind.CONFLICT)
        self.failures += report.count(OutcomeKind.FAILURE)
        self.edges_added += report.edges_added
        if not report.committed:
            self.rolled_back_units += 1


def ingest_source_units(
    units: Iterable[SourceUnit],
    *,
    engine: UpsertEngine,
    classifier: DependencyClassifier | None = None,
    cache: IngestionCache | None = None,
) -> IngestionSummary:
    """Classify and reconcile each unit in its own transaction.

    A unit whose classification raises is logged and recorded in
    ``failed_units``; the remaining units are still ingested.
    """

    effective_classifier = classifier or DependencyClassifier()
    effective_cache = cache if cache is not None else IngestionCache()
    summary = IngestionSummary(operation_id=engine.operation_id)

    for unit in units:
        summary.units += 1
        try:
            result = effective_classifier.classify(unit, ImportContext.from_facts(unit.imports))
        except Exception:
            log.exception("Failed to classify %s", unit.file_path)
            summary.failed_units.append(unit.file_path)
            continue
        result = effective_cache.strip_known(result)
        report = engine.reconcile(result)
        effective_cache.remember(result, report)
        summary.add(report)

    return summary


def ingest_fact_file(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    operation_id: str | None = None,
    mode: UpsertMode | None = None,
    database_uri: str | None = None,
) -> IngestionSummary:
    """Ingest a JSON Lines fact file into the configured graph store."""

    if unit_of_work_factory is None and not is_started():
        startup(database_uri=database_uri)
    effective_uow = unit_of_work_factory or SqlAlchemyGraphUnitOfWork

    config = get_reconciliation_config()
    if mode is not None:
        config = replace(config, mode=mode)
    engine = UpsertEngine(effective_uow, config=config, operation_id=operation_id)
    classifier = DependencyClassifier(get_classification_config())
    log.info(
        "Starting ingestion of %s: operation=%s, mode=%s",
        path,
        engine.operation_id,
        config.mode,
    )

    reader = FactDocumentReader(path)
    summary = ingest_source_units(reader, engine=engine, classifier=classifier)
    summary.invalid_documents = len(reader.invalid_lines)

    log.info(
        f"Finished ingestion: units={summary.units}, inserted={summary.inserted}, "
        f"updated={summary.updated}, skipped={summary.skipped}, "
        f"conflicts={summary.conflicts}, failures={summary.failures}, "
        f"edges={summary.edges_added}, invalid_documents={summary.invalid_documents}"
    )
    return summary
