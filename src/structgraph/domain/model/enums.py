"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Entity discriminator; the value doubles as the identifier prefix."""

    PACKAGE = "package"
    CLASS = "class"
    METHOD = "method"
    FIELD = "field"
    REPOSITORY = "repo"
    SUB_PROJECT = "subproject"
    ANNOTATION = "annotation"


class DeclarationKind(StrEnum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ANNOTATION = "annotation"


class EdgeType(StrEnum):
    CONTAINS = "contains"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    CALLS = "calls"
    USES = "uses"


class UsageKind(StrEnum):
    """Why a ``USES`` edge exists."""

    IMPORT = "import"
    INSTANTIATION = "instantiation"
    PARAMETER_TYPE = "parameter_type"
    RETURN_TYPE = "return_type"
    FIELD_TYPE = "field_type"
    STATIC_METHOD_CALL = "static_method_call"
    FIELD_USAGE = "field_usage"
    GENERIC_TYPE_ARGUMENT = "generic_type_argument"
    ANNOTATION_USAGE = "annotation_usage"


class OutcomeKind(StrEnum):
    INSERT = "insert"
    UPDATE = "update"
    SKIP = "skip"
    CONFLICT = "conflict"
    FAILURE = "failure"


class ChangeType(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    TYPE_CHANGED = "type_changed"


class UpsertMode(StrEnum):
    """How the engine treats entities that do or do not exist yet."""

    INSERT_ONLY = "insert_only"
    UPSERT = "upsert"
    UPDATE_ONLY = "update_only"
