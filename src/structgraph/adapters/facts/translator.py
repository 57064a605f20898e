"""Translate fact-document payloads into domain source units."""

from __future__ import annotations

from typing import TYPE_CHECKING

from structgraph.domain.classification import (
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
from structgraph.domain.model import DeclarationKind

if TYPE_CHECKING:
    from .schema import (
        AnnotationPayload,
        FieldPayload,
        InstantiationPayload,
        MethodPayload,
        SourceUnitPayload,
        TypePayload,
    )


_DECLARATION_KINDS: dict[str, DeclarationKind] = {
    "class": DeclarationKind.CLASS,
    "record": DeclarationKind.CLASS,
    "interface": DeclarationKind.INTERFACE,
    "enum": DeclarationKind.ENUM,
    "annotation": DeclarationKind.ANNOTATION,
}


def translate_source_unit(payload: SourceUnitPayload) -> SourceUnit:
    repository = None
    if payload.repository is not None:
        repository = RepositoryFact(
            name=payload.repository.name,
            local_path=payload.repository.local_path,
            url=payload.repository.url,
            default_branch=payload.repository.default_branch,
            commit_hash=payload.repository.commit_hash,
        )
    sub_project = None
    if payload.sub_project is not None:
        sub_project = SubProjectFact(
            name=payload.sub_project.name,
            path=payload.sub_project.path,
            project_type=payload.sub_project.project_type,
            build_file=payload.sub_project.build_file,
            version=payload.sub_project.version,
        )
    return SourceUnit(
        file_path=payload.file_path,
        package=PackageFact(payload.package) if payload.package else None,
        imports=tuple(
            ImportFact(name=item.name, is_static=item.is_static, is_wildcard=item.is_wildcard)
            for item in payload.imports
        ),
        types=tuple(_translate_type(item) for item in payload.types),
        repository=repository,
        sub_project=sub_project,
    )


def _translate_type(payload: TypePayload) -> TypeDeclarationFact:
    return TypeDeclarationFact(
        name=payload.name,
        kind=_DECLARATION_KINDS[payload.kind],
        visibility=payload.visibility,
        modifiers=tuple(payload.modifiers),
        type_parameters=tuple(payload.type_parameters),
        extends=tuple(payload.extends),
        implements=tuple(payload.implements),
        annotations=_annotations(payload.annotations),
        fields=tuple(_translate_field(item) for item in payload.fields),
        methods=tuple(_translate_method(item) for item in payload.methods),
        span=SourceSpan(payload.line_start, payload.line_end),
    )


def _translate_field(payload: FieldPayload) -> FieldFact:
    return FieldFact(
        name=payload.name,
        type_name=payload.type,
        visibility=payload.visibility,
        modifiers=tuple(payload.modifiers),
        annotations=_annotations(payload.annotations),
        instantiations=_instantiations(payload.instantiations),
        span=SourceSpan(payload.line_start, payload.line_end),
    )


def _translate_method(payload: MethodPayload) -> MethodFact:
    return MethodFact(
        name=payload.name,
        return_type=payload.return_type,
        parameters=tuple(
            ParameterFact(
                name=param.name,
                type_name=param.type,
                is_varargs=param.varargs,
                annotations=_annotations(param.annotations),
            )
            for param in payload.parameters
        ),
        type_parameters=tuple(payload.type_parameters),
        visibility=payload.visibility,
        modifiers=tuple(payload.modifiers),
        is_constructor=payload.constructor,
        annotations=_annotations(payload.annotations),
        instantiations=_instantiations(payload.instantiations),
        calls=tuple(
            MethodCallFact(name=call.name, scope=call.scope, argument_count=call.argument_count)
            for call in payload.calls
        ),
        field_accesses=tuple(
            FieldAccessFact(name=access.name, scope=access.scope)
            for access in payload.field_accesses
        ),
        span=SourceSpan(payload.line_start, payload.line_end),
    )


def _annotations(payloads: list[AnnotationPayload]) -> tuple[AnnotationFact, ...]:
    return tuple(
        AnnotationFact(name=item.name, value=item.value, attributes=dict(item.attributes))
        for item in payloads
    )


def _instantiations(payloads: list[InstantiationPayload]) -> tuple[InstantiationFact, ...]:
    return tuple(
        InstantiationFact(type_name=item.type, span=SourceSpan(item.line, item.line))
        for item in payloads
    )
