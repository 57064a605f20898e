from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from structgraph.adapters.sqlalchemy import (
    SqlAlchemyEdgeRepository,
    SqlAlchemyEntityRepository,
    SqlAlchemyGraphUnitOfWork,
    StartupError,
    entity_table,
    shutdown,
    startup,
)
from structgraph.adapters.sqlalchemy.unit_of_work import is_started
from structgraph.config import ConfigurationError
from structgraph.domain.classification import (
    DependencyClassifier,
    FieldFact,
    ImportFact,
    PackageFact,
    SourceUnit,
    TypeDeclarationFact,
)
from structgraph.domain.identity import class_id, method_id
from structgraph.domain.model import (
    DeclarationKind,
    DependencyEdge,
    EdgeType,
    EntityKind,
    Method,
    OutcomeKind,
    TypeDeclaration,
    UsageKind,
    UsageMetadata,
)
from structgraph.domain.ports import ConstraintViolation
from structgraph.domain.reconciliation import UpsertEngine

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session

OWNER = class_id("com.example", "UserService")


def _declaration() -> TypeDeclaration:
    return TypeDeclaration(
        id=OWNER,
        name="UserService",
        package_name="com.example",
        qualified_name="com.example.UserService",
        declaration_kind=DeclarationKind.INTERFACE,
        modifiers=("public", "abstract"),
        line_start=3,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyGraphUnitOfWork()


def test_startup_twice_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        with pytest.raises(StartupError):
            startup(engine=sqlite_engine)
    finally:
        shutdown()


def test_startup_rejects_malformed_database_uri() -> None:
    shutdown()

    with pytest.raises(ConfigurationError) as exc:
        startup(database_uri="not a database")

    assert exc.value.variable == "database URI"
    assert not is_started()


def test_entity_roundtrip(sqlite_session: Session) -> None:
    repository = SqlAlchemyEntityRepository(sqlite_session)
    method = Method(
        id=method_id(OWNER, "find", ["Long"]),
        name="find",
        class_id=OWNER,
        parameter_types=("Long",),
        parameter_names=("id",),
    )

    repository.add(_declaration())
    repository.add(method)
    sqlite_session.commit()

    stored = repository.get(OWNER)
    assert isinstance(stored, TypeDeclaration)
    assert stored.declaration_kind is DeclarationKind.INTERFACE
    assert stored.modifiers == ("public", "abstract")
    assert stored.created_at == datetime(2025, 1, 1, tzinfo=UTC)
    assert stored.attributes() == _declaration().attributes()

    stored_method = repository.get(method.id)
    assert isinstance(stored_method, Method)
    assert stored_method.parameter_types == ("Long",)
    assert repository.list_ids(EntityKind.METHOD) == [method.id]
    assert repository.get("class:com.example:Missing") is None


def test_update_replaces_attributes(sqlite_session: Session) -> None:
    repository = SqlAlchemyEntityRepository(sqlite_session)
    repository.add(_declaration())

    entity = repository.get(OWNER)
    assert isinstance(entity, TypeDeclaration)
    entity.line_start = 7
    repository.update(entity)

    row = sqlite_session.execute(select(entity_table).where(entity_table.c.id == OWNER)).one()
    assert row.attributes["line_start"] == 7


def test_duplicate_entity_raises_constraint_violation(sqlite_session: Session) -> None:
    repository = SqlAlchemyEntityRepository(sqlite_session)
    repository.add(_declaration())

    with pytest.raises(ConstraintViolation):
        repository.add(_declaration())


def test_edges_are_keyed(sqlite_session: Session) -> None:
    repository = SqlAlchemyEdgeRepository(sqlite_session)
    typed = DependencyEdge(
        OWNER,
        class_id("java.util", "List"),
        EdgeType.USES,
        UsageMetadata(
            usage_kind=UsageKind.FIELD_TYPE,
            context="field: names type: List<String>",
            qualified_name="java.util.List",
            is_external=True,
        ),
    )
    contains = DependencyEdge("package:com:example", OWNER, EdgeType.CONTAINS)

    repository.add(typed)
    repository.add(contains)

    assert repository.exists(typed.key)
    assert repository.exists(contains.key)
    assert not repository.exists((OWNER, class_id("java.util", "List"), EdgeType.USES, "", ""))
    assert repository.outgoing(OWNER) == [typed]
    with pytest.raises(ConstraintViolation):
        repository.add(typed)


def test_uncommitted_work_is_discarded(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGraphUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.entities.add(_declaration())

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.entities.get(OWNER) is None


def test_engine_reconciles_into_sqlite(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGraphUnitOfWork],
) -> None:
    unit = SourceUnit(
        file_path="src/main/java/com/example/UserService.java",
        package=PackageFact("com.example"),
        imports=(ImportFact(name="java.util.List"),),
        types=(
            TypeDeclarationFact(
                name="UserService",
                fields=(FieldFact(name="names", type_name="List<String>"),),
            ),
        ),
    )
    result = DependencyClassifier().classify(unit)
    engine = UpsertEngine(sqlite_unit_of_work, operation_id="upsert_sqlite")

    first = engine.reconcile(result)
    second = engine.reconcile(DependencyClassifier().classify(unit))

    assert first.committed
    assert first.count(OutcomeKind.INSERT) == len(result.entities)
    assert first.edges_added == len(result.edges)
    assert second.count(OutcomeKind.SKIP) == len(result.entities)
    assert second.edges_added == 0
    assert second.edges_existing == len(result.edges)

    with sqlite_unit_of_work() as uow:
        audit = uow.repositories.audit.for_operation("upsert_sqlite")
        stored = uow.repositories.entities.get(class_id("java.util", "List"))

    assert len(audit) == len(result.entities)
    assert {record.outcome for record in audit} == {OutcomeKind.INSERT}
    assert stored is not None
    assert stored.provisional


def test_batch_sees_its_own_inserts(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGraphUnitOfWork],
) -> None:
    engine = UpsertEngine(sqlite_unit_of_work, operation_id="upsert_dup")

    outcomes = engine.upsert_batch([_declaration(), _declaration()])

    assert [o.kind for o in outcomes] == [OutcomeKind.INSERT, OutcomeKind.SKIP]
