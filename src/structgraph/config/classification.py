"""Classification settings: external-package prefixes and built-in types."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from .env import env_flag, env_list

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_EXTERNAL_PREFIXES: Final[tuple[str, ...]] = (
    "java.",
    "javax.",
    "org.springframework.",
    "org.slf4j.",
    "com.fasterxml.jackson.",
    "org.apache.",
    "com.google.",
)

_JAVA_LANG: Final[tuple[str, ...]] = (
    "Boolean",
    "Byte",
    "Character",
    "Class",
    "Deprecated",
    "Double",
    "Enum",
    "Error",
    "Exception",
    "Float",
    "FunctionalInterface",
    "IllegalArgumentException",
    "IllegalStateException",
    "Integer",
    "Iterable",
    "Long",
    "Math",
    "Number",
    "Object",
    "Override",
    "Record",
    "Runnable",
    "RuntimeException",
    "Short",
    "String",
    "StringBuilder",
    "SuppressWarnings",
    "System",
    "Thread",
    "Throwable",
    "Void",
)

_JAVA_UTIL: Final[tuple[str, ...]] = (
    "ArrayList",
    "Collection",
    "HashMap",
    "HashSet",
    "List",
    "Map",
    "Optional",
    "Set",
)

DEFAULT_BUILTIN_TYPES: Final[Mapping[str, str]] = MappingProxyType(
    {
        **{name: f"java.lang.{name}" for name in _JAVA_LANG},
        **{name: f"java.util.{name}" for name in _JAVA_UTIL},
    }
)


@dataclass(frozen=True, slots=True)
class ClassificationConfig:
    """Knobs for :class:`structgraph.domain.classification.DependencyClassifier`."""

    external_prefixes: tuple[str, ...] = DEFAULT_EXTERNAL_PREFIXES
    builtin_types: Mapping[str, str] = field(default_factory=lambda: DEFAULT_BUILTIN_TYPES)
    include_private: bool = True

    def is_external(self, qualified_name: str) -> bool:
        return any(qualified_name.startswith(prefix) for prefix in self.external_prefixes)


def get_classification_config() -> ClassificationConfig:
    prefixes = env_list("STRUCTGRAPH_EXTERNAL_PREFIXES")
    return ClassificationConfig(
        external_prefixes=prefixes if prefixes is not None else DEFAULT_EXTERNAL_PREFIXES,
        include_private=env_flag("STRUCTGRAPH_INCLUDE_PRIVATE", default=True),
    )
