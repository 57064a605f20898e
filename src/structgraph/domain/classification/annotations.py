"""Annotation helpers: attribute cleanup and framework detection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .facts import AnnotationFact

FRAMEWORK_PREFIXES: Final[tuple[str, ...]] = (
    "java.lang.",
    "org.springframework.",
    "org.junit.",
    "jakarta.",
    "javax.",
    "com.fasterxml.jackson.",
)

_FRAMEWORK_TYPES: Final[tuple[tuple[str, str], ...]] = (
    ("java.lang.", "Java"),
    ("org.springframework.", "Spring"),
    ("org.junit.", "JUnit"),
    ("junit.", "JUnit"),
    ("jakarta.validation.", "Validation"),
    ("javax.validation.", "Validation"),
    ("jakarta.persistence.", "JPA"),
    ("javax.persistence.", "JPA"),
    ("com.fasterxml.jackson.", "Jackson"),
)

# keys the classifier adds to annotation edge metadata
TARGET_TYPE_KEY: Final[str] = "target_type"
FRAMEWORK_TYPE_KEY: Final[str] = "framework_type"
RESERVED_KEYS: Final[frozenset[str]] = frozenset({TARGET_TYPE_KEY, FRAMEWORK_TYPE_KEY})
RENAMED_KEY_PREFIX: Final[str] = "attribute."


def is_framework_annotation(qualified_name: str) -> bool:
    return qualified_name.startswith(FRAMEWORK_PREFIXES)


def framework_type(qualified_name: str) -> str | None:
    for prefix, label in _FRAMEWORK_TYPES:
        if qualified_name.startswith(prefix):
            return label
    return None


def clean_attribute_value(raw: str) -> str:
    """Strip surrounding whitespace and one pair of matching quotes."""

    cleaned = raw.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("'", '"'):
        return cleaned[1:-1]
    return cleaned


def annotation_attributes(fact: AnnotationFact) -> dict[str, str]:
    """Cleaned attribute values keyed by attribute name.

    An attribute named like one of :data:`RESERVED_KEYS` is stored as
    ``attribute.<name>`` so it survives next to the classifier's own keys.
    """

    attributes: dict[str, str] = {}
    if fact.value is not None:
        attributes["value"] = clean_attribute_value(fact.value)
    for key, value in fact.attributes.items():
        name = RENAMED_KEY_PREFIX + key if key in RESERVED_KEYS else key
        attributes[name] = clean_attribute_value(value)
    return attributes
