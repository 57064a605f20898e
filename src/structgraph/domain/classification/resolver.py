"""Resolution of type names seen in one unit to qualified names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from structgraph.domain.identity import annotation_id, class_id

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structgraph.config.classification import ClassificationConfig

    from .imports import ImportContext


class ResolutionSource(StrEnum):
    QUALIFIED = "qualified"
    IMPORT = "import"
    BUILTIN = "builtin"
    SAME_PACKAGE = "same_package"


@dataclass(frozen=True, slots=True)
class ResolvedType:
    qualified_name: str
    package: str
    simple_name: str
    is_external: bool
    source: ResolutionSource

    @property
    def class_id(self) -> str:
        return class_id(self.package, self.simple_name)

    @property
    def annotation_id(self) -> str:
        return annotation_id(self.package, self.simple_name)


def split_qualified_name(
    qualified_name: str,
    known_packages: Iterable[str] = (),
) -> tuple[str, str]:
    """Split ``a.b.Outer.Inner`` into ``("a.b", "Outer.Inner")``.

    The longest of ``known_packages`` followed only by capitalized segments
    wins. Otherwise the simple name is the trailing run of capitalized
    segments, so a mixed-case package segment (``com.Acme.app.Service``) stays
    in the package. A fully lower-case name keeps its last segment as the
    simple name. A capitalized segment directly before the type
    (``com.Acme.Service``) is only recognised as package through
    ``known_packages``.
    """

    for package in sorted(known_packages, key=len, reverse=True):
        if not package or not qualified_name.startswith(package + "."):
            continue
        rest = qualified_name[len(package) + 1 :]
        if all(segment[:1].isupper() for segment in rest.split(".")):
            return package, rest
    segments = [segment for segment in qualified_name.split(".") if segment]
    if not segments:
        return "", qualified_name
    start = len(segments)
    while start > 0 and segments[start - 1][0].isupper():
        start -= 1
    if start == len(segments):
        start -= 1
    return ".".join(segments[:start]), ".".join(segments[start:])


def _looks_qualified(name: str) -> bool:
    head, dot, _ = name.partition(".")
    return bool(dot) and head[:1].islower()


class NameResolver:
    """Resolve names against imports, then built-ins, then the current package.

    The external flag is decided purely by the configured package prefixes,
    except that built-in types are always external.
    """

    def __init__(
        self,
        *,
        package: str,
        imports: ImportContext,
        config: ClassificationConfig,
    ) -> None:
        self.package = package
        self.imports = imports
        self.config = config

    def resolve(self, name: str) -> ResolvedType:
        name = name.strip()
        if _looks_qualified(name):
            return self._resolved(name, ResolutionSource.QUALIFIED)

        head, dot, tail = name.partition(".")
        imported = self.imports.resolve(head)
        if imported is not None:
            return self._resolved(imported + dot + tail, ResolutionSource.IMPORT)

        builtin = self.config.builtin_types.get(head)
        if builtin is not None:
            package, simple_name = split_qualified_name(builtin + dot + tail)
            return ResolvedType(
                qualified_name=builtin + dot + tail,
                package=package,
                simple_name=simple_name,
                is_external=True,
                source=ResolutionSource.BUILTIN,
            )

        qualified = f"{self.package}.{name}" if self.package else name
        return ResolvedType(
            qualified_name=qualified,
            package=self.package,
            simple_name=name,
            is_external=self.config.is_external(qualified),
            source=ResolutionSource.SAME_PACKAGE,
        )

    def resolve_qualified(self, qualified_name: str) -> ResolvedType:
        return self._resolved(qualified_name.strip(), ResolutionSource.QUALIFIED)

    def _resolved(self, qualified_name: str, source: ResolutionSource) -> ResolvedType:
        package, simple_name = split_qualified_name(qualified_name, (self.package,))
        return ResolvedType(
            qualified_name=qualified_name,
            package=package,
            simple_name=simple_name,
            is_external=self.config.is_external(qualified_name),
            source=source,
        )
