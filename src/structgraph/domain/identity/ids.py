"""Deterministic, kind-prefixed identifiers for graph entities.

Every identifier is ``<kind prefix>:<natural key parts>``. The prefix keeps
identifiers of different kinds disjoint even when their natural keys agree.
Parts that could grow without bound (parameter lists, filesystem paths) are
replaced by a four-byte MD5 hash.

Known tradeoff: four bytes bound identifier length but admit rare collisions
when many repositories are federated into one graph.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from structgraph.domain.model.enums import EntityKind

from .errors import InvalidIdentityError
from .normalize import (
    normalize_file_path,
    normalize_package,
    normalize_simple_name,
    normalize_type_name,
    short_hash,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

SEPARATOR: Final[str] = ":"
AUDIT_PREFIX: Final[str] = "upsert_audit"


def _require(value: str, label: str) -> str:
    if not value:
        raise InvalidIdentityError(f"{label} must not be empty")
    if SEPARATOR in value:
        raise InvalidIdentityError(f"{label} must not contain {SEPARATOR!r}: {value!r}")
    return value


def _join(kind: EntityKind | str, *parts: str) -> str:
    return SEPARATOR.join((str(kind), *parts))


def package_id(package: str) -> str:
    """``package:<parent>:<last segment>``."""

    normalized = _require(normalize_package(package), "package name")
    parent, _, last = normalized.rpartition(".")
    return _join(EntityKind.PACKAGE, parent, last)


def class_id(package: str | None, name: str) -> str:
    """``class:<package>:<SimpleName>``; the default package is an empty part."""

    normalized_package = normalize_package(package)
    if SEPARATOR in normalized_package:
        raise InvalidIdentityError(f"package name must not contain {SEPARATOR!r}")
    simple_name = _require(normalize_simple_name(name), "class name")
    return _join(EntityKind.CLASS, normalized_package, simple_name)


def annotation_id(package: str | None, name: str) -> str:
    normalized_package = normalize_package(package)
    if SEPARATOR in normalized_package:
        raise InvalidIdentityError(f"package name must not contain {SEPARATOR!r}")
    simple_name = _require(normalize_simple_name(name), "annotation name")
    return _join(EntityKind.ANNOTATION, normalized_package, simple_name)


def split_class_id(owner_id: str) -> tuple[str, str]:
    """Return ``(package, simple name)`` of a class identifier."""

    prefix, sep, rest = owner_id.partition(SEPARATOR) if owner_id else ("", "", "")
    package, sep_inner, name = rest.rpartition(SEPARATOR)
    if not sep or not sep_inner or prefix != EntityKind.CLASS or not name or SEPARATOR in package:
        raise InvalidIdentityError(f"not a class identifier: {owner_id!r}")
    return package, name


def method_id(owner_id: str, name: str, parameter_types: Sequence[str] = ()) -> str:
    """``method:<package>:<Class>:<name>:<hash of parameter types>``.

    The parameter list is always hashed, including the empty one, so overloads
    never collide and every method identifier has the same shape.
    """

    package, class_name = split_class_id(owner_id)
    method_name = _require(normalize_simple_name(name), "method name")
    params = ",".join(normalize_type_name(param) for param in parameter_types)
    return _join(EntityKind.METHOD, package, class_name, method_name, short_hash(params))


def field_id(owner_id: str, name: str) -> str:
    package, class_name = split_class_id(owner_id)
    field_name = _require(normalize_simple_name(name), "field name")
    return _join(EntityKind.FIELD, package, class_name, field_name)


def repository_id(local_path: str, name: str) -> str:
    """``repo:<name>:<hash of normalized local path>``."""

    repo_name = _require(normalize_simple_name(name), "repository name")
    path = normalize_file_path(local_path)
    if not path:
        raise InvalidIdentityError("repository path must not be empty")
    return _join(EntityKind.REPOSITORY, repo_name, short_hash(path))


def sub_project_id(owner_repository_id: str, name: str, path: str | None = None) -> str:
    """``subproject:<repository id>:<name>:<hash of normalized path>``."""

    prefix, _, rest = owner_repository_id.partition(SEPARATOR)
    if prefix != EntityKind.REPOSITORY or rest.count(SEPARATOR) != 1:
        raise InvalidIdentityError(f"not a repository identifier: {owner_repository_id!r}")
    project_name = _require(normalize_simple_name(name), "sub-project name")
    return _join(
        EntityKind.SUB_PROJECT,
        owner_repository_id,
        project_name,
        short_hash(normalize_file_path(path)),
    )


def check_operation_id(operation_id: str) -> str:
    """Return the trimmed operation id, or raise if it cannot be part of an audit id."""

    operation = _require(operation_id.strip() if operation_id else "", "operation id")
    if any(char.isspace() for char in operation):
        raise InvalidIdentityError(f"operation id must not contain whitespace: {operation!r}")
    return operation


def audit_id(operation_id: str, entity_id: str, timestamp: datetime | None = None) -> str:
    """``upsert_audit:<operation>:<hash of entity id>:<epoch millis>``."""

    operation = check_operation_id(operation_id)
    if not entity_id:
        raise InvalidIdentityError("entity id must not be empty")
    moment = timestamp or datetime.now(tz=UTC)
    millis = int(moment.timestamp() * 1000)
    return SEPARATOR.join((AUDIT_PREFIX, operation, short_hash(entity_id), str(millis)))


_GENERATORS: Final[dict[EntityKind, Callable[..., str]]] = {
    EntityKind.PACKAGE: package_id,
    EntityKind.CLASS: class_id,
    EntityKind.METHOD: method_id,
    EntityKind.FIELD: field_id,
    EntityKind.REPOSITORY: repository_id,
    EntityKind.SUB_PROJECT: sub_project_id,
    EntityKind.ANNOTATION: annotation_id,
}


def generate_id(kind: EntityKind, *parts: object) -> str:
    """Dispatch to the generator for ``kind``.

    ``parts`` follow the per-kind generator signature, e.g.
    ``generate_id(EntityKind.METHOD, owner_id, "save", ["String"])``.
    """

    try:
        generator = _GENERATORS[EntityKind(kind)]
    except (KeyError, ValueError) as exc:
        raise InvalidIdentityError(f"unknown entity kind: {kind!r}") from exc
    try:
        return generator(*parts)
    except TypeError as exc:
        raise InvalidIdentityError(f"wrong natural key for {kind}: {parts!r}") from exc
