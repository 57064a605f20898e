from __future__ import annotations

from typing import TYPE_CHECKING

from structgraph.config import ClassificationConfig
from structgraph.domain.classification import (
    AnnotationFact,
    DependencyClassifier,
    FieldAccessFact,
    FieldFact,
    ImportFact,
    InstantiationFact,
    MethodCallFact,
    MethodFact,
    PackageFact,
    ParameterFact,
    RepositoryFact,
    SourceUnit,
    SubProjectFact,
    TypeDeclarationFact,
)
from structgraph.domain.identity import (
    class_id,
    field_id,
    method_id,
    package_id,
    repository_id,
    sub_project_id,
)
from structgraph.domain.model import EdgeType, TypeDeclaration, UsageKind

if TYPE_CHECKING:
    from structgraph.domain.classification import ClassificationResult
    from structgraph.domain.model import DependencyEdge

OWNER = class_id("com.example", "UserService")


def _unit(
    *types: TypeDeclarationFact,
    imports: tuple[ImportFact, ...] = (),
    repository: RepositoryFact | None = None,
    sub_project: SubProjectFact | None = None,
) -> SourceUnit:
    return SourceUnit(
        file_path="src/main/java/com/example/UserService.java",
        package=PackageFact("com.example"),
        imports=imports,
        types=types,
        repository=repository,
        sub_project=sub_project,
    )


def _classify(unit: SourceUnit, config: ClassificationConfig | None = None) -> ClassificationResult:
    return DependencyClassifier(config).classify(unit)


def _edges_to(result: ClassificationResult, usage: UsageKind, to_id: str) -> list[DependencyEdge]:
    return [edge for edge in result.uses(usage) if edge.to_id == to_id]


def test_field_of_generic_type_emits_type_and_argument_edges() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(FieldFact(name="names", type_name="List<String>"),),
        ),
        imports=(ImportFact(name="java.util.List"),),
    )

    result = _classify(unit)

    (field_type,) = _edges_to(result, UsageKind.FIELD_TYPE, class_id("java.util", "List"))
    assert field_type.from_id == OWNER
    assert field_type.context == "field: names type: List<String>"
    assert field_type.metadata is not None
    assert field_type.metadata.qualified_name == "java.util.List"
    assert field_type.metadata.is_external

    (argument,) = _edges_to(
        result, UsageKind.GENERIC_TYPE_ARGUMENT, class_id("java.lang", "String")
    )
    assert argument.context == "field names <List<String>>"
    assert argument.metadata is not None
    assert argument.metadata.extra["type_argument"] == "String"


def test_nested_generic_arguments_recurse() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(FieldFact(name="index", type_name="Map<String, List<Integer>>"),),
        )
    )

    result = _classify(unit)

    contexts = {
        (edge.to_id, edge.context) for edge in result.uses(UsageKind.GENERIC_TYPE_ARGUMENT)
    }
    assert contexts == {
        (class_id("java.lang", "String"), "field index <Map<String,List<Integer>>>"),
        (class_id("java.util", "List"), "field index <Map<String,List<Integer>>>"),
        (class_id("java.lang", "Integer"), "nested_generic index <List<Integer>>"),
    }


def test_primitives_and_type_parameters_produce_no_edges() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="Box",
            type_parameters=("T",),
            fields=(
                FieldFact(name="count", type_name="int"),
                FieldFact(name="value", type_name="T"),
                FieldFact(name="values", type_name="List<T>"),
            ),
        )
    )

    result = _classify(unit)

    assert [edge.to_id for edge in result.uses(UsageKind.FIELD_TYPE)] == [
        class_id("java.util", "List")
    ]
    assert result.uses(UsageKind.GENERIC_TYPE_ARGUMENT) == []


def test_unresolved_types_become_same_package_placeholders() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(FieldFact(name="order", type_name="Order"),),
        )
    )

    result = _classify(unit)

    placeholder = result.entity(class_id("com.example", "Order"))
    assert isinstance(placeholder, TypeDeclaration)
    assert placeholder.provisional
    assert not placeholder.is_external
    declared = result.entity(OWNER)
    assert declared is not None
    assert not declared.provisional


def test_declaration_replaces_placeholder_within_a_unit() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(FieldFact(name="helper", type_name="Helper"),),
        ),
        TypeDeclarationFact(name="Helper"),
    )

    result = _classify(unit)

    helper = result.entity(class_id("com.example", "Helper"))
    assert helper is not None
    assert not helper.provisional
    assert len([e for e in result.entities if e.id == helper.id]) == 1


def test_declarations_and_containment() -> None:
    find = MethodFact(
        name="find",
        return_type="Optional<User>",
        parameters=(ParameterFact(name="id", type_name="Long"),),
    )
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(FieldFact(name="name", type_name="String"),),
            methods=(find,),
        )
    )

    result = _classify(unit)

    find_id = method_id(OWNER, "find", ["Long"])
    contains = {(e.from_id, e.to_id) for e in result.edges if e.edge_type is EdgeType.CONTAINS}
    assert contains == {
        (package_id("com.example"), OWNER),
        (OWNER, field_id(OWNER, "name")),
        (OWNER, find_id),
    }
    (return_edge,) = result.uses(UsageKind.RETURN_TYPE)
    assert return_edge.context == "method: find returns: Optional<User>"
    (param_edge,) = result.uses(UsageKind.PARAMETER_TYPE)
    assert param_edge.context == "param: id type: Long (method: find)"
    assert param_edge.to_id == class_id("java.lang", "Long")
    (generic,) = result.uses(UsageKind.GENERIC_TYPE_ARGUMENT)
    assert generic.context == "method_return find <Optional<User>>"
    assert generic.to_id == class_id("com.example", "User")


def test_inheritance_edges() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            extends=("BaseService<User>",),
            implements=("Runnable", "Comparable<UserService>"),
        )
    )

    result = _classify(unit)

    extends = [e for e in result.edges if e.edge_type is EdgeType.EXTENDS]
    implements = [e for e in result.edges if e.edge_type is EdgeType.IMPLEMENTS]
    assert [e.to_id for e in extends] == [class_id("com.example", "BaseService")]
    assert {e.to_id for e in implements} == {
        class_id("java.lang", "Runnable"),
        class_id("com.example", "Comparable"),
    }
    contexts = {e.context for e in result.uses(UsageKind.GENERIC_TYPE_ARGUMENT)}
    assert contexts == {
        "extends UserService <BaseService<User>>",
        "implements UserService <Comparable<UserService>>",
    }


def test_annotations_are_attached_to_the_annotated_element() -> None:
    save = MethodFact(
        name="save",
        parameters=(
            ParameterFact(
                name="user",
                type_name="User",
                annotations=(AnnotationFact(name="Valid"),),
            ),
        ),
        annotations=(
            AnnotationFact(name="@Override"),
            AnnotationFact(name="RequestMapping", value='"/users"', attributes={"method": "GET"}),
        ),
    )
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            annotations=(AnnotationFact(name="Service"),),
            fields=(
                FieldFact(
                    name="repository",
                    type_name="UserRepository",
                    annotations=(AnnotationFact(name="Autowired"),),
                ),
            ),
            methods=(save,),
        ),
        imports=(
            ImportFact(name="org.springframework.stereotype.Service"),
            ImportFact(name="org.springframework.beans.factory.annotation.Autowired"),
            ImportFact(name="org.springframework.web.bind.annotation.RequestMapping"),
            ImportFact(name="jakarta.validation.Valid"),
        ),
    )

    result = _classify(unit)

    save_id = method_id(OWNER, "save", ["User"])
    by_context = {edge.context: edge for edge in result.uses(UsageKind.ANNOTATION_USAGE)}
    assert set(by_context) == {
        "class-level annotation",
        "field: repository",
        "method: save",
        "parameter: user (method: save)",
    }

    service = by_context["class-level annotation"]
    assert service.from_id == OWNER
    assert service.to_id == "annotation:org.springframework.stereotype:Service"
    assert service.metadata is not None
    assert service.metadata.extra == {"target_type": "class", "framework_type": "Spring"}

    assert by_context["field: repository"].from_id == field_id(OWNER, "repository")
    parameter = by_context["parameter: user (method: save)"]
    assert parameter.from_id == save_id
    assert parameter.metadata is not None
    assert parameter.metadata.extra["framework_type"] == "Validation"

    method_edges = [e for e in result.uses(UsageKind.ANNOTATION_USAGE) if e.from_id == save_id]
    targets = {edge.to_id: edge for edge in method_edges if edge.context == "method: save"}
    mapping = targets["annotation:org.springframework.web.bind.annotation:RequestMapping"]
    assert mapping.metadata is not None
    assert mapping.metadata.extra["value"] == "/users"
    assert mapping.metadata.extra["method"] == "GET"
    assert "annotation:java.lang:Override" in targets

    override = result.entity("annotation:java.lang:Override")
    assert override is not None
    assert override.attributes()["framework_type"] == "Java"


def test_same_class_calls_match_name_and_arity() -> None:
    save = MethodFact(
        name="save",
        parameters=(ParameterFact(name="user", type_name="User"),),
        calls=(MethodCallFact(name="validate", argument_count=1),),
    )
    validate_one = MethodFact(
        name="validate",
        parameters=(ParameterFact(name="user", type_name="User"),),
    )
    validate_none = MethodFact(name="validate")
    unit = _unit(
        TypeDeclarationFact(name="UserService", methods=(save, validate_one, validate_none))
    )

    result = _classify(unit)

    calls = [(e.from_id, e.to_id) for e in result.edges if e.edge_type is EdgeType.CALLS]
    assert calls == [
        (method_id(OWNER, "save", ["User"]), method_id(OWNER, "validate", ["User"])),
    ]


def test_varargs_calls_accept_extra_arguments() -> None:
    log = MethodFact(
        name="log",
        parameters=(
            ParameterFact(name="format", type_name="String"),
            ParameterFact(name="args", type_name="Object", is_varargs=True),
        ),
    )
    run = MethodFact(name="run", calls=(MethodCallFact(name="log", argument_count=3),))
    unit = _unit(TypeDeclarationFact(name="UserService", methods=(log, run)))

    result = _classify(unit)

    log_id = method_id(OWNER, "log", ["String", "Object[]"])
    calls = [e.to_id for e in result.edges if e.edge_type is EdgeType.CALLS]
    assert calls == [log_id]


def test_static_method_calls() -> None:
    test = MethodFact(
        name="testSave",
        calls=(
            MethodCallFact(name="assertEquals", argument_count=2),
            MethodCallFact(name="of", scope="List", argument_count=1),
            MethodCallFact(name="build", scope="builder"),
        ),
    )
    unit = _unit(
        TypeDeclarationFact(name="UserService", methods=(test,)),
        imports=(
            ImportFact(name="org.junit.Assert.assertEquals", is_static=True),
            ImportFact(name="java.util.List"),
        ),
    )

    result = _classify(unit)

    static_calls = {edge.to_id: edge.context for edge in result.uses(UsageKind.STATIC_METHOD_CALL)}
    assert static_calls == {
        class_id("org.junit", "Assert"): "static method call: assertEquals (method: testSave)",
        class_id("java.util", "List"): "static method call: of (method: testSave)",
    }


def test_field_usage_and_instantiation() -> None:
    get_names = MethodFact(
        name="getNames",
        return_type="List<String>",
        field_accesses=(FieldAccessFact(name="names"), FieldAccessFact(name="size", scope="other")),
        instantiations=(InstantiationFact(type_name="ArrayList<String>"),),
    )
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(
                FieldFact(
                    name="names",
                    type_name="List<String>",
                    instantiations=(InstantiationFact(type_name="LinkedList<>"),),
                ),
            ),
            methods=(get_names,),
        ),
        imports=(ImportFact(name="java.util.LinkedList"),),
    )

    result = _classify(unit)

    (usage,) = result.uses(UsageKind.FIELD_USAGE)
    assert usage.from_id == method_id(OWNER, "getNames")
    assert usage.to_id == field_id(OWNER, "names")
    assert usage.context == "method: getNames field: names"
    instantiations = {e.to_id: e.context for e in result.uses(UsageKind.INSTANTIATION)}
    assert instantiations == {
        class_id("java.util", "ArrayList"): "method: getNames",
        class_id("java.util", "LinkedList"): "field: names",
    }


def test_private_members_can_be_excluded() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(
                FieldFact(name="secret", type_name="Token", visibility="private"),
                FieldFact(name="name", type_name="String", visibility="public"),
            ),
            methods=(MethodFact(name="helper", visibility="private"),),
        )
    )

    visible = _classify(unit)
    hidden = _classify(unit, ClassificationConfig(include_private=False))

    assert visible.entity(field_id(OWNER, "secret")) is not None
    assert hidden.entity(field_id(OWNER, "secret")) is None
    assert hidden.entity(method_id(OWNER, "helper")) is None
    assert hidden.entity(class_id("com.example", "Token")) is None
    assert hidden.entity(field_id(OWNER, "name")) is not None


def test_imports_become_edges_from_each_declared_type() -> None:
    unit = _unit(
        TypeDeclarationFact(name="UserService"),
        imports=(ImportFact(name="java.util", is_wildcard=True), ImportFact(name="java.util.List")),
    )

    result = _classify(unit)

    imports = {edge.to_id: edge for edge in result.uses(UsageKind.IMPORT)}
    assert set(imports) == {package_id("java.util"), class_id("java.util", "List")}
    assert imports[package_id("java.util")].context == "java.util"
    wildcard_package = result.entity(package_id("java.util"))
    assert wildcard_package is not None
    assert wildcard_package.provisional


def test_annotation_attribute_named_like_metadata_key_is_kept() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            annotations=(
                AnnotationFact(
                    name="Target",
                    attributes={"target_type": "'METHOD'", "framework_type": "custom"},
                ),
            ),
        ),
        imports=(ImportFact(name="org.springframework.context.annotation.Target"),),
    )

    result = _classify(unit)

    (edge,) = result.uses(UsageKind.ANNOTATION_USAGE)
    assert edge.metadata is not None
    assert edge.metadata.extra == {
        "target_type": "class",
        "framework_type": "Spring",
        "attribute.target_type": "METHOD",
        "attribute.framework_type": "custom",
    }


def test_import_from_mixed_case_package_targets_declaration_id() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(FieldFact(name="billing", type_name="BillingService"),),
        ),
        imports=(ImportFact(name="com.Acme.billing.BillingService"),),
    )

    result = _classify(unit)

    target = class_id("com.acme.billing", "BillingService")
    (field_type,) = _edges_to(result, UsageKind.FIELD_TYPE, target)
    assert field_type.from_id == OWNER
    assert result.entity(target) is not None


def test_repository_and_sub_project_containment() -> None:
    unit = _unit(
        TypeDeclarationFact(name="UserService"),
        repository=RepositoryFact(name="shop", local_path="/work/shop"),
        sub_project=SubProjectFact(name="core", path="core", project_type="maven"),
    )

    result = _classify(unit)

    repo = repository_id("/work/shop", "shop")
    sub = sub_project_id(repo, "core", "core")
    assert result.entity(repo) is not None
    assert result.entity(sub) is not None
    contains = {(e.from_id, e.to_id) for e in result.edges if e.edge_type is EdgeType.CONTAINS}
    assert (repo, sub) in contains
    assert (sub, package_id("com.example")) in contains
    assert (sub, OWNER) in contains
    declared = result.entity(OWNER)
    assert isinstance(declared, TypeDeclaration)
    assert declared.repository_id == repo
    assert declared.sub_project_id == sub


def test_sub_project_without_repository_is_ignored() -> None:
    unit = _unit(
        TypeDeclarationFact(name="UserService"),
        sub_project=SubProjectFact(name="core", path="core"),
    )

    result = _classify(unit)

    assert [e.kind.value for e in result.entities] == ["package", "class"]


def test_classification_is_deterministic() -> None:
    unit = _unit(
        TypeDeclarationFact(
            name="UserService",
            fields=(FieldFact(name="index", type_name="Map<String, List<Integer>>"),),
        )
    )

    first = _classify(unit)
    second = _classify(unit)

    assert [e.id for e in first.entities] == [e.id for e in second.entities]
    assert [e.key for e in first.edges] == [e.key for e in second.edges]
    assert len({e.key for e in first.edges}) == len(first.edges)
