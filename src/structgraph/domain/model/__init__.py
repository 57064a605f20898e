"""Domain model for the code graph."""

from __future__ import annotations

from .audit import AuditRecord
from .edge import DependencyEdge, EdgeKey, UsageMetadata
from .entity import (
    ENTITY_CLASS_BY_KIND,
    LIFECYCLE_ATTRIBUTES,
    Annotation,
    Attributes,
    AttributeValue,
    CodeEntity,
    Field,
    Method,
    Package,
    Repository,
    SubProject,
    TypeDeclaration,
    restore_entity,
)
from .enums import (
    ChangeType,
    DeclarationKind,
    EdgeType,
    EntityKind,
    OutcomeKind,
    UpsertMode,
    UsageKind,
)

__all__ = [
    "ENTITY_CLASS_BY_KIND",
    "LIFECYCLE_ATTRIBUTES",
    "Annotation",
    "AttributeValue",
    "Attributes",
    "AuditRecord",
    "ChangeType",
    "CodeEntity",
    "DeclarationKind",
    "DependencyEdge",
    "EdgeKey",
    "EdgeType",
    "EntityKind",
    "Field",
    "Method",
    "OutcomeKind",
    "Package",
    "Repository",
    "SubProject",
    "TypeDeclaration",
    "UpsertMode",
    "UsageKind",
    "restore_entity",
]
