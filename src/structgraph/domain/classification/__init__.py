"""Dependency classification: facts in, entities and typed edges out."""

from __future__ import annotations

from .annotations import clean_attribute_value, framework_type, is_framework_annotation
from .classifier import ClassificationResult, DependencyClassifier
from .facts import (
    AnnotationFact,
    FieldAccessFact,
    FieldFact,
    ImportFact,
    InstantiationFact,
    MethodCallFact,
    MethodFact,
    PackageFact,
    ParameterFact,
    RepositoryFact,
    SourceSpan,
    SourceUnit,
    SubProjectFact,
    TypeDeclarationFact,
)
from .imports import ImportContext
from .resolver import NameResolver, ResolutionSource, ResolvedType, split_qualified_name
from .typeref import PRIMITIVE_TYPES, TypeRef, parse_type

__all__ = [
    "PRIMITIVE_TYPES",
    "AnnotationFact",
    "ClassificationResult",
    "DependencyClassifier",
    "FieldAccessFact",
    "FieldFact",
    "ImportContext",
    "ImportFact",
    "InstantiationFact",
    "MethodCallFact",
    "MethodFact",
    "NameResolver",
    "PackageFact",
    "ParameterFact",
    "RepositoryFact",
    "ResolutionSource",
    "ResolvedType",
    "SourceSpan",
    "SourceUnit",
    "SubProjectFact",
    "TypeDeclarationFact",
    "TypeRef",
    "clean_attribute_value",
    "framework_type",
    "is_framework_annotation",
    "parse_type",
    "split_qualified_name",
]
