"""Turn one unit's structural facts into typed entities and edges.

Responsibilities:
- resolve every referenced type name (imports, built-ins, same package)
- emit declared entities plus provisional placeholders for referenced types
- emit one ``USES`` edge per usage site, labelled with a usage kind and context
- emit containment, inheritance and same-class call edges

Classification never fails on unresolved names: a name that is neither
imported nor built in is assumed to live in the current package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from structgraph.config.classification import ClassificationConfig
from structgraph.domain.identity import (
    class_id,
    field_id,
    method_id,
    normalize_file_path,
    normalize_method_signature,
    normalize_type_name,
    package_id,
    repository_id,
    sub_project_id,
)
from structgraph.domain.model import (
    Annotation,
    DependencyEdge,
    EdgeType,
    Field,
    Method,
    Package,
    Repository,
    SubProject,
    TypeDeclaration,
    UsageKind,
    UsageMetadata,
)

from .annotations import (
    FRAMEWORK_TYPE_KEY,
    TARGET_TYPE_KEY,
    annotation_attributes,
    framework_type,
    is_framework_annotation,
)
from .imports import ImportContext
from .resolver import NameResolver
from .typeref import parse_type

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structgraph.domain.model import CodeEntity, EdgeKey

    from .facts import (
        AnnotationFact,
        FieldFact,
        ImportFact,
        InstantiationFact,
        MethodCallFact,
        MethodFact,
        SourceUnit,
        TypeDeclarationFact,
    )
    from .resolver import ResolvedType
    from .typeref import TypeRef

log = getLogger(__name__)


@dataclass(slots=True)
class ClassificationResult:
    """Deduplicated entities and edges for one unit, in discovery order."""

    entities: list[CodeEntity] = field(default_factory=list)
    edges: list[DependencyEdge] = field(default_factory=list)

    def entity(self, entity_id: str) -> CodeEntity | None:
        return next((entity for entity in self.entities if entity.id == entity_id), None)

    def uses(self, usage_kind: UsageKind) -> list[DependencyEdge]:
        return [
            edge
            for edge in self.edges
            if edge.metadata is not None and edge.metadata.usage_kind is usage_kind
        ]


class _ResultBuilder:
    def __init__(self) -> None:
        self._entities: dict[str, CodeEntity] = {}
        self._edges: dict[EdgeKey, DependencyEdge] = {}

    def add_entity(self, entity: CodeEntity) -> None:
        # a declaration replaces a placeholder, never the other way round
        existing = self._entities.get(entity.id)
        if existing is None or (existing.provisional and not entity.provisional):
            self._entities[entity.id] = entity

    def add_edge(self, edge: DependencyEdge) -> None:
        self._edges.setdefault(edge.key, edge)

    def build(self) -> ClassificationResult:
        return ClassificationResult(
            entities=list(self._entities.values()),
            edges=list(self._edges.values()),
        )


class DependencyClassifier:
    """Classify source units into graph entities and dependency edges."""

    def __init__(self, config: ClassificationConfig | None = None) -> None:
        self.config = config or ClassificationConfig()

    def classify(
        self,
        unit: SourceUnit,
        import_context: ImportContext | None = None,
    ) -> ClassificationResult:
        imports = import_context or ImportContext.from_facts(unit.imports)
        result = _UnitClassification(unit, imports, self.config).run()
        log.debug(
            "Classified %s: %d entities, %d edges",
            unit.file_path,
            len(result.entities),
            len(result.edges),
        )
        return result


class _UnitClassification:
    def __init__(
        self,
        unit: SourceUnit,
        imports: ImportContext,
        config: ClassificationConfig,
    ) -> None:
        self.unit = unit
        self.imports = imports
        self.config = config
        self.package = unit.package_name
        self.file_path = normalize_file_path(unit.file_path)
        self.resolver = NameResolver(package=self.package, imports=imports, config=config)
        self.builder = _ResultBuilder()
        self.package_id: str | None = None
        self.repository_id: str | None = None
        self.sub_project_id: str | None = None

    def run(self) -> ClassificationResult:
        self._declare_repository()
        if self.package:
            self.package_id = package_id(self.package)
            self.builder.add_entity(
                Package(
                    id=self.package_id,
                    name=self.package,
                    path=self.package.replace(".", "/"),
                )
            )
            self._contains_in_sub_project(self.package_id)
        for type_fact in self.unit.types:
            self._declare_type(type_fact)
        return self.builder.build()

    # declarations -------------------------------------------------------------

    def _declare_repository(self) -> None:
        repository = self.unit.repository
        if repository is not None:
            self.repository_id = repository_id(repository.local_path, repository.name)
            self.builder.add_entity(
                Repository(
                    id=self.repository_id,
                    name=repository.name,
                    local_path=normalize_file_path(repository.local_path),
                    url=repository.url,
                    default_branch=repository.default_branch,
                    commit_hash=repository.commit_hash,
                )
            )

        sub_project = self.unit.sub_project
        if sub_project is None:
            return
        if self.repository_id is None:
            log.warning(
                "Ignoring sub-project %s of %s: no repository given",
                sub_project.name,
                self.unit.file_path,
            )
            return
        self.sub_project_id = sub_project_id(self.repository_id, sub_project.name, sub_project.path)
        self.builder.add_entity(
            SubProject(
                id=self.sub_project_id,
                name=sub_project.name,
                path=normalize_file_path(sub_project.path),
                repository_id=self.repository_id,
                project_type=sub_project.project_type,
                build_file=sub_project.build_file,
                version=sub_project.version,
            )
        )
        self._contains(self.repository_id, self.sub_project_id)

    def _declare_type(self, fact: TypeDeclarationFact) -> None:
        owner_id = class_id(self.package, fact.name)
        qualified_name = f"{self.package}.{fact.name}" if self.package else fact.name
        self.builder.add_entity(
            TypeDeclaration(
                id=owner_id,
                name=fact.name,
                package_name=self.package,
                qualified_name=qualified_name,
                declaration_kind=fact.kind,
                visibility=fact.visibility,
                modifiers=fact.modifiers,
                file_path=self.file_path or None,
                line_start=fact.span.line_start,
                line_end=fact.span.line_end,
                is_external=self.config.is_external(qualified_name),
                repository_id=self.repository_id,
                sub_project_id=self.sub_project_id,
            )
        )
        if self.package_id is not None:
            self._contains(self.package_id, owner_id)
        self._contains_in_sub_project(owner_id)

        scope = frozenset(fact.type_parameters)
        for import_fact in self.unit.imports:
            self._import(owner_id, import_fact)
        for supertype in fact.extends:
            self._supertype(owner_id, fact.name, supertype, EdgeType.EXTENDS, scope)
        for supertype in fact.implements:
            self._supertype(owner_id, fact.name, supertype, EdgeType.IMPLEMENTS, scope)
        for annotation in fact.annotations:
            self._annotation(owner_id, annotation, "class", "class-level annotation")

        field_ids: dict[str, str] = {}
        for field_fact in fact.fields:
            if self._hidden(field_fact.visibility):
                continue
            field_ids[field_fact.name] = self._declare_field(owner_id, field_fact, scope)

        methods = [
            (method_fact, method_id(owner_id, method_fact.name, method_fact.parameter_types))
            for method_fact in fact.methods
            if not self._hidden(method_fact.visibility)
        ]
        for method_fact, member_id in methods:
            self._declare_method(
                owner_id,
                qualified_name,
                method_fact,
                member_id,
                siblings=methods,
                field_ids=field_ids,
                class_scope=scope,
            )

    def _declare_field(self, owner_id: str, fact: FieldFact, scope: frozenset[str]) -> str:
        member_id = field_id(owner_id, fact.name)
        type_text = normalize_type_name(fact.type_name)
        self.builder.add_entity(
            Field(
                id=member_id,
                name=fact.name,
                class_id=owner_id,
                type_name=type_text,
                visibility=fact.visibility,
                modifiers=fact.modifiers,
                file_path=self.file_path or None,
                line_number=fact.span.line_start,
            )
        )
        self._contains(owner_id, member_id)
        self._contains_in_sub_project(member_id)

        self._type_usage(
            owner_id,
            fact.type_name,
            UsageKind.FIELD_TYPE,
            f"field: {fact.name} type: {type_text}",
            scope=scope,
            generic_usage=("field", fact.name),
        )
        for instantiation in fact.instantiations:
            self._instantiation(owner_id, instantiation, f"field: {fact.name}", scope)
        for annotation in fact.annotations:
            self._annotation(member_id, annotation, "field", f"field: {fact.name}")
        return member_id

    def _declare_method(  # noqa: PLR0913
        self,
        owner_id: str,
        owner_name: str,
        fact: MethodFact,
        member_id: str,
        *,
        siblings: list[tuple[MethodFact, str]],
        field_ids: Mapping[str, str],
        class_scope: frozenset[str],
    ) -> None:
        scope = class_scope | frozenset(fact.type_parameters)
        parameter_types = fact.parameter_types
        return_type = None
        if fact.return_type and not fact.is_constructor:
            return_type = normalize_type_name(fact.return_type)
        self.builder.add_entity(
            Method(
                id=member_id,
                name=fact.name,
                class_id=owner_id,
                signature=normalize_method_signature(fact.name, parameter_types),
                return_type=return_type,
                parameter_types=tuple(normalize_type_name(param) for param in parameter_types),
                parameter_names=tuple(param.name for param in fact.parameters),
                visibility=fact.visibility,
                modifiers=fact.modifiers,
                file_path=self.file_path or None,
                line_start=fact.span.line_start,
                line_end=fact.span.line_end,
            )
        )
        self._contains(owner_id, member_id)
        self._contains_in_sub_project(member_id)

        if return_type is not None:
            self._type_usage(
                owner_id,
                fact.return_type,
                UsageKind.RETURN_TYPE,
                f"method: {fact.name} returns: {return_type}",
                scope=scope,
                generic_usage=("method_return", fact.name),
            )
        for parameter, type_name in zip(fact.parameters, parameter_types, strict=True):
            self._type_usage(
                owner_id,
                type_name,
                UsageKind.PARAMETER_TYPE,
                f"param: {parameter.name} type: {normalize_type_name(type_name)} "
                f"(method: {fact.name})",
                scope=scope,
                generic_usage=("method_param", f"{fact.name}.{parameter.name}"),
            )
            for annotation in parameter.annotations:
                self._annotation(
                    member_id,
                    annotation,
                    "parameter",
                    f"parameter: {parameter.name} (method: {fact.name})",
                )
        for annotation in fact.annotations:
            self._annotation(member_id, annotation, "method", f"method: {fact.name}")
        for instantiation in fact.instantiations:
            self._instantiation(owner_id, instantiation, f"method: {fact.name}", scope)
        for call in fact.calls:
            self._call(owner_id, fact, member_id, call, siblings)
        for access in fact.field_accesses:
            target_id = field_ids.get(access.name)
            if access.scope not in (None, "this") or target_id is None:
                continue
            self._uses(
                member_id,
                target_id,
                UsageKind.FIELD_USAGE,
                f"method: {fact.name} field: {access.name}",
                qualified_name=f"{owner_name}.{access.name}",
                is_external=False,
            )

    # usages -------------------------------------------------------------------

    def _import(self, owner_id: str, fact: ImportFact) -> None:
        name = fact.name.strip()
        if not name:
            return
        if fact.is_wildcard and not fact.is_static:
            target_id = package_id(name)
            self.builder.add_entity(
                Package(id=target_id, name=name, path=name.replace(".", "/"), provisional=True)
            )
            self._uses(
                owner_id,
                target_id,
                UsageKind.IMPORT,
                name,
                qualified_name=name,
                is_external=self.config.is_external(f"{name}."),
            )
            return
        target = self._reference(self.resolver.resolve_qualified(fact.owner_name))
        self._uses_type(owner_id, target, UsageKind.IMPORT, name)

    def _supertype(
        self,
        owner_id: str,
        owner_name: str,
        text: str,
        edge_type: EdgeType,
        scope: frozenset[str],
    ) -> None:
        ref = parse_type(text)
        if ref is None or ref.wildcard or ref.name in scope:
            return
        target = self._reference(self.resolver.resolve(ref.name))
        self.builder.add_edge(DependencyEdge(owner_id, target.class_id, edge_type))
        self._generic_arguments(owner_id, ref, edge_type.value, owner_name, scope)

    def _type_usage(  # noqa: PLR0913
        self,
        from_id: str,
        text: str | None,
        usage_kind: UsageKind,
        context: str,
        *,
        scope: frozenset[str],
        generic_usage: tuple[str, str],
    ) -> None:
        ref = parse_type(text)
        if ref is None or ref.wildcard or ref.is_primitive or ref.name in scope:
            return
        target = self._reference(self.resolver.resolve(ref.name))
        self._uses_type(from_id, target, usage_kind, context)
        usage, element = generic_usage
        self._generic_arguments(from_id, ref, usage, element, scope)

    def _generic_arguments(
        self,
        from_id: str,
        ref: TypeRef,
        usage: str,
        element: str,
        scope: frozenset[str],
    ) -> None:
        if not ref.arguments:
            return
        context = f"{usage} {element} <{ref.text}>"
        for argument in ref.arguments:
            if argument.is_unbounded_wildcard or argument.is_primitive:
                continue
            if argument.name not in scope:
                target = self._reference(self.resolver.resolve(argument.name))
                self._uses_type(
                    from_id,
                    target,
                    UsageKind.GENERIC_TYPE_ARGUMENT,
                    context,
                    extra={"type_argument": argument.text},
                )
            self._generic_arguments(from_id, argument, "nested_generic", element, scope)

    def _instantiation(
        self,
        from_id: str,
        fact: InstantiationFact,
        context: str,
        scope: frozenset[str],
    ) -> None:
        ref = parse_type(fact.type_name)
        if ref is None or ref.wildcard or ref.is_primitive or ref.name in scope:
            return
        target = self._reference(self.resolver.resolve(ref.name))
        self._uses_type(from_id, target, UsageKind.INSTANTIATION, context)

    def _call(
        self,
        owner_id: str,
        caller: MethodFact,
        caller_id: str,
        call: MethodCallFact,
        siblings: list[tuple[MethodFact, str]],
    ) -> None:
        if call.scope in (None, "this"):
            callees = [
                callee_id
                for callee, callee_id in siblings
                if callee.name == call.name and _arity_matches(callee, call.argument_count)
            ]
            for callee_id in callees:
                self.builder.add_edge(DependencyEdge(caller_id, callee_id, EdgeType.CALLS))
            static_owner = self.imports.static_owner(call.name)
            if callees or call.scope is not None or static_owner is None:
                return
            target = self._reference(self.resolver.resolve_qualified(static_owner))
        elif call.scope in self.imports:
            target = self._reference(self.resolver.resolve(call.scope))
        else:
            log.debug("Call scope not imported: %s.%s", call.scope, call.name)
            return
        self._uses_type(
            owner_id,
            target,
            UsageKind.STATIC_METHOD_CALL,
            f"static method call: {call.name} (method: {caller.name})",
        )

    def _annotation(
        self,
        from_id: str,
        fact: AnnotationFact,
        target_type: str,
        context: str,
    ) -> None:
        name = fact.name.strip().lstrip("@")
        if not name:
            return
        resolved = self.resolver.resolve(name)
        detected_framework = framework_type(resolved.qualified_name)
        self.builder.add_entity(
            Annotation(
                id=resolved.annotation_id,
                name=resolved.simple_name,
                qualified_name=resolved.qualified_name,
                is_external=resolved.is_external,
                is_framework=is_framework_annotation(resolved.qualified_name),
                framework_type=detected_framework,
            )
        )
        extra = annotation_attributes(fact)
        extra[TARGET_TYPE_KEY] = target_type
        if detected_framework is not None:
            extra[FRAMEWORK_TYPE_KEY] = detected_framework
        self._uses(
            from_id,
            resolved.annotation_id,
            UsageKind.ANNOTATION_USAGE,
            context,
            qualified_name=resolved.qualified_name,
            is_external=resolved.is_external,
            extra=extra,
        )

    # helpers ------------------------------------------------------------------

    def _reference(self, resolved: ResolvedType) -> ResolvedType:
        """Make sure a referenced type exists, as a placeholder if need be."""

        self.builder.add_entity(
            TypeDeclaration(
                id=resolved.class_id,
                name=resolved.simple_name,
                package_name=resolved.package,
                qualified_name=resolved.qualified_name,
                is_external=resolved.is_external,
                provisional=True,
            )
        )
        return resolved

    def _uses_type(
        self,
        from_id: str,
        target: ResolvedType,
        usage_kind: UsageKind,
        context: str,
        *,
        extra: Mapping[str, str] | None = None,
    ) -> None:
        self._uses(
            from_id,
            target.class_id,
            usage_kind,
            context,
            qualified_name=target.qualified_name,
            is_external=target.is_external,
            extra=extra,
        )

    def _uses(  # noqa: PLR0913
        self,
        from_id: str,
        to_id: str,
        usage_kind: UsageKind,
        context: str,
        *,
        qualified_name: str | None,
        is_external: bool,
        extra: Mapping[str, str] | None = None,
    ) -> None:
        metadata = UsageMetadata(
            usage_kind=usage_kind,
            context=context,
            qualified_name=qualified_name,
            is_external=is_external,
            extra=dict(extra or {}),
        )
        self.builder.add_edge(DependencyEdge(from_id, to_id, EdgeType.USES, metadata))

    def _contains(self, parent_id: str, child_id: str) -> None:
        self.builder.add_edge(DependencyEdge(parent_id, child_id, EdgeType.CONTAINS))

    def _contains_in_sub_project(self, child_id: str) -> None:
        if self.sub_project_id is not None:
            self._contains(self.sub_project_id, child_id)

    def _hidden(self, visibility: str | None) -> bool:
        return not self.config.include_private and visibility == "private"


def _arity_matches(method: MethodFact, argument_count: int | None) -> bool:
    if argument_count is None:
        return True
    declared = len(method.parameters)
    if method.parameters and method.parameters[-1].is_varargs:
        return argument_count >= declared - 1
    return argument_count == declared
