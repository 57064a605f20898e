"""Graph entities.

Each entity kind lists its comparable attributes explicitly through
``attributes()``; the reconciliation engine diffs those maps and never looks
at dataclass fields reflectively. ``provisional`` marks entities that were
created from a reference (a forward-declared placeholder or an external type)
instead of from their own declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .enums import DeclarationKind, EntityKind

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

type AttributeValue = str | int | bool | tuple[str, ...] | datetime | None
type Attributes = dict[str, AttributeValue]

LIFECYCLE_ATTRIBUTES: tuple[str, ...] = ("created_at", "updated_at")


@dataclass(eq=False, kw_only=True)
class CodeEntity:
    """Base class for every persisted graph entity."""

    ENTITY_KIND: ClassVar[EntityKind]

    id: str
    provisional: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def kind(self) -> EntityKind:
        return self.ENTITY_KIND

    def attributes(self) -> Attributes:
        """Return the kind-specific attributes that take part in diffing."""

        raise NotImplementedError

    def snapshot(self) -> Attributes:
        """Attributes plus lifecycle timestamps, as seen by the diff."""

        values = self.attributes()
        values["created_at"] = self.created_at
        values["updated_at"] = self.updated_at
        return values

    def apply_attributes(self, values: Mapping[str, AttributeValue]) -> None:
        known = self.attributes()
        for name, value in values.items():
            if name not in known:
                raise KeyError(f"{type(self).__name__} has no attribute {name!r}")
            setattr(self, name, value)

    def __repr__(self) -> str:
        marker = ", provisional" if self.provisional else ""
        return f"{type(self).__name__}({self.id!r}{marker})"


@dataclass(eq=False, kw_only=True)
class Package(CodeEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PACKAGE

    name: str
    path: str | None = None

    def attributes(self) -> Attributes:
        return {"name": self.name, "path": self.path}


@dataclass(eq=False, kw_only=True)
class TypeDeclaration(CodeEntity):
    """A class, interface, enum or annotation-type declaration."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CLASS

    name: str
    package_name: str = ""
    qualified_name: str | None = None
    declaration_kind: DeclarationKind = DeclarationKind.CLASS
    visibility: str | None = None
    modifiers: tuple[str, ...] = ()
    file_path: str | None = None
    line_start: int | None = None
    line_end: int | None = None
    is_external: bool = False
    repository_id: str | None = None
    sub_project_id: str | None = None

    def __post_init__(self) -> None:
        self.declaration_kind = DeclarationKind(self.declaration_kind)
        self.modifiers = tuple(self.modifiers)

    def attributes(self) -> Attributes:
        return {
            "name": self.name,
            "package_name": self.package_name,
            "qualified_name": self.qualified_name,
            "declaration_kind": self.declaration_kind.value,
            "visibility": self.visibility,
            "modifiers": self.modifiers,
            "file_path": self.file_path,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "is_external": self.is_external,
            "repository_id": self.repository_id,
            "sub_project_id": self.sub_project_id,
        }

    def apply_attributes(self, values: Mapping[str, AttributeValue]) -> None:
        super().apply_attributes(values)
        self.__post_init__()


@dataclass(eq=False, kw_only=True)
class Method(CodeEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.METHOD

    name: str
    class_id: str
    signature: str | None = None
    return_type: str | None = None
    parameter_types: tuple[str, ...] = ()
    parameter_names: tuple[str, ...] = ()
    visibility: str | None = None
    modifiers: tuple[str, ...] = ()
    file_path: str | None = None
    line_start: int | None = None
    line_end: int | None = None

    def attributes(self) -> Attributes:
        return {
            "name": self.name,
            "class_id": self.class_id,
            "signature": self.signature,
            "return_type": self.return_type,
            "parameter_types": self.parameter_types,
            "parameter_names": self.parameter_names,
            "visibility": self.visibility,
            "modifiers": self.modifiers,
            "file_path": self.file_path,
            "line_start": self.line_start,
            "line_end": self.line_end,
        }


@dataclass(eq=False, kw_only=True)
class Field(CodeEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.FIELD

    name: str
    class_id: str
    type_name: str | None = None
    visibility: str | None = None
    modifiers: tuple[str, ...] = ()
    file_path: str | None = None
    line_number: int | None = None

    def attributes(self) -> Attributes:
        return {
            "name": self.name,
            "class_id": self.class_id,
            "type_name": self.type_name,
            "visibility": self.visibility,
            "modifiers": self.modifiers,
            "file_path": self.file_path,
            "line_number": self.line_number,
        }


@dataclass(eq=False, kw_only=True)
class Repository(CodeEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.REPOSITORY

    name: str
    local_path: str
    url: str | None = None
    default_branch: str | None = None
    commit_hash: str | None = None

    def attributes(self) -> Attributes:
        return {
            "name": self.name,
            "local_path": self.local_path,
            "url": self.url,
            "default_branch": self.default_branch,
            "commit_hash": self.commit_hash,
        }


@dataclass(eq=False, kw_only=True)
class SubProject(CodeEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.SUB_PROJECT

    name: str
    path: str
    repository_id: str
    project_type: str | None = None
    build_file: str | None = None
    version: str | None = None

    def attributes(self) -> Attributes:
        return {
            "name": self.name,
            "path": self.path,
            "repository_id": self.repository_id,
            "project_type": self.project_type,
            "build_file": self.build_file,
            "version": self.version,
        }


@dataclass(eq=False, kw_only=True)
class Annotation(CodeEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.ANNOTATION

    name: str
    qualified_name: str | None = None
    is_external: bool = False
    is_framework: bool = False
    framework_type: str | None = None

    def attributes(self) -> Attributes:
        return {
            "name": self.name,
            "qualified_name": self.qualified_name,
            "is_external": self.is_external,
            "is_framework": self.is_framework,
            "framework_type": self.framework_type,
        }


ENTITY_CLASS_BY_KIND: dict[EntityKind, type[CodeEntity]] = {
    EntityKind.PACKAGE: Package,
    EntityKind.CLASS: TypeDeclaration,
    EntityKind.METHOD: Method,
    EntityKind.FIELD: Field,
    EntityKind.REPOSITORY: Repository,
    EntityKind.SUB_PROJECT: SubProject,
    EntityKind.ANNOTATION: Annotation,
}


def restore_entity(
    kind: EntityKind,
    *,
    entity_id: str,
    attributes: Mapping[str, object],
    provisional: bool,
    created_at: datetime | None,
    updated_at: datetime | None,
) -> CodeEntity:
    """Rebuild an entity from its stored attribute map.

    Sequences come back from storage as lists and are restored to tuples.
    """

    entity_cls = ENTITY_CLASS_BY_KIND[kind]
    values = {
        name: tuple(value) if isinstance(value, list) else value
        for name, value in attributes.items()
    }
    return entity_cls(
        id=entity_id,
        provisional=provisional,
        created_at=created_at,
        updated_at=updated_at,
        **values,  # pyright: ignore[reportArgumentType]
    )
