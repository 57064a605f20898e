"""Deterministic identity and natural-key normalization."""

from __future__ import annotations

from .errors import INVALID_ARGUMENT, InvalidIdentityError
from .ids import (
    AUDIT_PREFIX,
    annotation_id,
    audit_id,
    check_operation_id,
    class_id,
    field_id,
    generate_id,
    method_id,
    package_id,
    repository_id,
    split_class_id,
    sub_project_id,
)
from .normalize import (
    normalize_file_path,
    normalize_method_signature,
    normalize_package,
    normalize_simple_name,
    normalize_type_name,
    short_hash,
)
from .validate import (
    CollisionAnalysis,
    RiskLevel,
    ValidationResult,
    analyze_collision_risk,
    extract_kind,
    is_audit_id,
    validate_id,
    validate_id_strict,
)

__all__ = [
    "AUDIT_PREFIX",
    "INVALID_ARGUMENT",
    "CollisionAnalysis",
    "InvalidIdentityError",
    "RiskLevel",
    "ValidationResult",
    "analyze_collision_risk",
    "annotation_id",
    "audit_id",
    "check_operation_id",
    "class_id",
    "extract_kind",
    "field_id",
    "generate_id",
    "is_audit_id",
    "method_id",
    "normalize_file_path",
    "normalize_method_signature",
    "normalize_package",
    "normalize_simple_name",
    "normalize_type_name",
    "package_id",
    "repository_id",
    "short_hash",
    "split_class_id",
    "sub_project_id",
    "validate_id",
    "validate_id_strict",
]
