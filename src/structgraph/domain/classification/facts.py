"""Structural facts produced by a language front-end for one source file.

Facts are plain, immutable records. They carry source spellings exactly as
written (simple or qualified type names, generic arguments, annotation
values with their quotes); resolution and normalization happen later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from structgraph.domain.model.enums import DeclarationKind

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class SourceSpan:
    line_start: int | None = None
    line_end: int | None = None


@dataclass(frozen=True, slots=True)
class PackageFact:
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportFact:
    """``import a.b.C;``, ``import a.b.*;`` or ``import static a.b.C.member;``."""

    name: str
    is_static: bool = False
    is_wildcard: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2]

    @property
    def owner_name(self) -> str:
        """Qualified name of the type an import points into."""

        if self.is_static and not self.is_wildcard:
            return self.name.rpartition(".")[0]
        return self.name


@dataclass(frozen=True, slots=True, kw_only=True)
class AnnotationFact:
    """Marker (no value), single-value or key/value annotation."""

    name: str
    value: str | None = None
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class ParameterFact:
    name: str
    type_name: str
    is_varargs: bool = False
    annotations: tuple[AnnotationFact, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class InstantiationFact:
    type_name: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass(frozen=True, slots=True, kw_only=True)
class MethodCallFact:
    name: str
    scope: str | None = None
    argument_count: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldAccessFact:
    name: str
    scope: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldFact:
    name: str
    type_name: str
    visibility: str | None = None
    modifiers: tuple[str, ...] = ()
    annotations: tuple[AnnotationFact, ...] = ()
    instantiations: tuple[InstantiationFact, ...] = ()
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass(frozen=True, slots=True, kw_only=True)
class MethodFact:
    name: str
    return_type: str | None = None
    parameters: tuple[ParameterFact, ...] = ()
    type_parameters: tuple[str, ...] = ()
    visibility: str | None = None
    modifiers: tuple[str, ...] = ()
    is_constructor: bool = False
    annotations: tuple[AnnotationFact, ...] = ()
    instantiations: tuple[InstantiationFact, ...] = ()
    calls: tuple[MethodCallFact, ...] = ()
    field_accesses: tuple[FieldAccessFact, ...] = ()
    span: SourceSpan = field(default_factory=SourceSpan)

    @property
    def parameter_types(self) -> tuple[str, ...]:
        return tuple(
            f"{param.type_name}[]" if param.is_varargs else param.type_name
            for param in self.parameters
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class TypeDeclarationFact:
    name: str
    kind: DeclarationKind = DeclarationKind.CLASS
    visibility: str | None = None
    modifiers: tuple[str, ...] = ()
    type_parameters: tuple[str, ...] = ()
    extends: tuple[str, ...] = ()
    implements: tuple[str, ...] = ()
    annotations: tuple[AnnotationFact, ...] = ()
    fields: tuple[FieldFact, ...] = ()
    methods: tuple[MethodFact, ...] = ()
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass(frozen=True, slots=True, kw_only=True)
class RepositoryFact:
    name: str
    local_path: str
    url: str | None = None
    default_branch: str | None = None
    commit_hash: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SubProjectFact:
    name: str
    path: str
    project_type: str | None = None
    build_file: str | None = None
    version: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceUnit:
    """Facts for one source file, in source order."""

    file_path: str
    package: PackageFact | None = None
    imports: tuple[ImportFact, ...] = ()
    types: tuple[TypeDeclarationFact, ...] = ()
    repository: RepositoryFact | None = None
    sub_project: SubProjectFact | None = None

    @property
    def package_name(self) -> str:
        return self.package.name.strip() if self.package else ""
