"""Identifier validation and collision-risk analysis.

Everything here fails closed: malformed or foreign input yields ``False`` /
``None`` / an invalid result, never an exception.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import Final

from structgraph.domain.model.enums import EntityKind

from .ids import AUDIT_PREFIX, SEPARATOR

log = getLogger(__name__)

_PART = r"[^:\s]+"
_OPTIONAL_PART = r"[^:\s]*"
_HASH = r"[0-9a-f]{8}"

_PATTERNS: Final[dict[EntityKind, re.Pattern[str]]] = {
    EntityKind.PACKAGE: re.compile(rf"package:{_OPTIONAL_PART}:{_PART}"),
    EntityKind.CLASS: re.compile(rf"class:{_OPTIONAL_PART}:{_PART}"),
    EntityKind.METHOD: re.compile(rf"method:{_OPTIONAL_PART}:{_PART}:{_PART}:{_HASH}"),
    EntityKind.FIELD: re.compile(rf"field:{_OPTIONAL_PART}:{_PART}:{_PART}"),
    EntityKind.REPOSITORY: re.compile(rf"repo:{_PART}:{_HASH}"),
    EntityKind.SUB_PROJECT: re.compile(rf"subproject:repo:{_PART}:{_HASH}:{_PART}:{_HASH}"),
    EntityKind.ANNOTATION: re.compile(rf"annotation:{_OPTIONAL_PART}:{_PART}"),
}
_AUDIT_PATTERN: Final[re.Pattern[str]] = re.compile(rf"{AUDIT_PREFIX}:{_PART}:{_HASH}:\d+")


class RiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    message: str | None = None


@dataclass(frozen=True, slots=True)
class CollisionAnalysis:
    risk: RiskLevel
    reason: str


def validate_id_strict(entity_id: object, kind: EntityKind) -> ValidationResult:
    """Check ``entity_id`` against the full identifier format of ``kind``."""

    if not isinstance(entity_id, str) or not entity_id.strip():
        return ValidationResult(valid=False, message="identifier must be a non-empty string")
    pattern = _PATTERNS.get(kind)
    if pattern is None:
        return ValidationResult(valid=False, message=f"unknown entity kind: {kind!r}")
    if pattern.fullmatch(entity_id) is None:
        message = f"invalid format for {kind} identifier: {entity_id}"
        log.debug(message)
        return ValidationResult(valid=False, message=message)
    return ValidationResult(valid=True)


def validate_id(entity_id: object, kind: EntityKind) -> bool:
    return validate_id_strict(entity_id, kind).valid


def is_audit_id(value: object) -> bool:
    return isinstance(value, str) and _AUDIT_PATTERN.fullmatch(value) is not None


def extract_kind(entity_id: object) -> EntityKind | None:
    """Return the kind named by the identifier prefix, or ``None``."""

    if not isinstance(entity_id, str):
        return None
    prefix, sep, _ = entity_id.partition(SEPARATOR)
    if not sep:
        return None
    try:
        return EntityKind(prefix)
    except ValueError:
        return None


def analyze_collision_risk(entity_id: str, kind: EntityKind) -> CollisionAnalysis:
    """Rough estimate of how likely ``entity_id`` is to collide with another."""

    if not validate_id(entity_id, kind):
        return CollisionAnalysis(RiskLevel.HIGH, "identifier is not well formed")

    parts = entity_id.split(SEPARATOR)
    match kind:
        case EntityKind.CLASS | EntityKind.ANNOTATION:
            package, name = parts[1], parts[2]
            if not package and len(name) < 3:
                return CollisionAnalysis(RiskLevel.MEDIUM, "short name in the default package")
            if not package:
                return CollisionAnalysis(RiskLevel.MEDIUM, "declared in the default package")
            if len(name) < 2:
                return CollisionAnalysis(RiskLevel.MEDIUM, "very short name")
        case EntityKind.METHOD:
            if len(parts[3]) < 2:
                return CollisionAnalysis(RiskLevel.MEDIUM, "very short method name")
            return CollisionAnalysis(RiskLevel.LOW, "signature hash disambiguates overloads")
        case EntityKind.FIELD:
            if len(parts[3]) < 2:
                return CollisionAnalysis(RiskLevel.MEDIUM, "very short field name")
        case EntityKind.PACKAGE:
            if not parts[1]:
                return CollisionAnalysis(RiskLevel.MEDIUM, "single-level package name")
        case EntityKind.REPOSITORY:
            if len(parts[1]) < 3:
                return CollisionAnalysis(RiskLevel.MEDIUM, "short repository name")
            return CollisionAnalysis(RiskLevel.LOW, "path hash separates same-named clones")
        case EntityKind.SUB_PROJECT:
            pass
    return CollisionAnalysis(RiskLevel.LOW, "well-formed identifier")
