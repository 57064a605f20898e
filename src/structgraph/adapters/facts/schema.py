"""Pydantic models describing front-end fact documents (one per source file)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DeclarationKindName = Literal["class", "interface", "enum", "annotation", "record"]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class FactsBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SpanPayload(FactsBaseModel):
    line_start: int | None = Field(default=None, alias="lineStart")
    line_end: int | None = Field(default=None, alias="lineEnd")


class ImportPayload(FactsBaseModel):
    name: str
    is_static: bool = Field(default=False, alias="static")
    is_wildcard: bool = Field(default=False, alias="wildcard")

    @model_validator(mode="before")
    @classmethod
    def _parse_import_statement(cls, value: object) -> object:
        # plain strings: "java.util.List", "java.util.*", "static a.B.member"
        if not isinstance(value, str):
            return value
        text = value.strip().removeprefix("import ").removesuffix(";").strip()
        is_static = text.startswith("static ")
        if is_static:
            text = text.removeprefix("static ").strip()
        is_wildcard = text.endswith(".*")
        if is_wildcard:
            text = text.removesuffix(".*")
        return {"name": text, "static": is_static, "wildcard": is_wildcard}


class AnnotationPayload(FactsBaseModel):
    name: str
    value: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _normalize_compact_schema(cls, value: object) -> object:
        if isinstance(value, str):
            return {"name": value}
        if isinstance(value, Mapping):
            mapping_value = cast(Mapping[str, object], value)
            raw_attributes = mapping_value.get("attributes")
            if isinstance(raw_attributes, Mapping):
                data: dict[str, object] = dict(mapping_value)
                data["attributes"] = {
                    str(key): str(item)
                    for key, item in cast(Mapping[object, object], raw_attributes).items()
                }
                return data
        return value

    @field_validator("name")
    @classmethod
    def _strip_at_sign(cls, value: str) -> str:
        return value.strip().lstrip("@")


class ParameterPayload(FactsBaseModel):
    name: str
    type: str
    varargs: bool = False
    annotations: list[AnnotationPayload] = Field(default_factory=list)


class InstantiationPayload(FactsBaseModel):
    type: str
    line: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_type_name(cls, value: object) -> object:
        if isinstance(value, str):
            return {"type": value}
        return value


class CallPayload(FactsBaseModel):
    name: str
    scope: str | None = None
    argument_count: int | None = Field(default=None, alias="argumentCount")

    _normalize_scope = field_validator("scope", mode="before")(_blank_to_none)


class FieldAccessPayload(FactsBaseModel):
    name: str
    scope: str | None = None

    _normalize_scope = field_validator("scope", mode="before")(_blank_to_none)

    @model_validator(mode="before")
    @classmethod
    def _from_name(cls, value: object) -> object:
        if isinstance(value, str):
            return {"name": value}
        return value


class FieldPayload(SpanPayload):
    name: str
    type: str
    visibility: str | None = None
    modifiers: list[str] = Field(default_factory=list)
    annotations: list[AnnotationPayload] = Field(default_factory=list)
    instantiations: list[InstantiationPayload] = Field(default_factory=list)

    _normalize_visibility = field_validator("visibility", mode="before")(_blank_to_none)


class MethodPayload(SpanPayload):
    name: str
    return_type: str | None = Field(default=None, alias="returnType")
    constructor: bool = False
    visibility: str | None = None
    modifiers: list[str] = Field(default_factory=list)
    type_parameters: list[str] = Field(default_factory=list, alias="typeParameters")
    parameters: list[ParameterPayload] = Field(default_factory=list)
    annotations: list[AnnotationPayload] = Field(default_factory=list)
    instantiations: list[InstantiationPayload] = Field(default_factory=list)
    calls: list[CallPayload] = Field(default_factory=list)
    field_accesses: list[FieldAccessPayload] = Field(default_factory=list, alias="fieldAccesses")

    _normalize_visibility = field_validator("visibility", mode="before")(_blank_to_none)
    _normalize_return_type = field_validator("return_type", mode="before")(_blank_to_none)


class TypePayload(SpanPayload):
    name: str
    kind: DeclarationKindName = "class"
    visibility: str | None = None
    modifiers: list[str] = Field(default_factory=list)
    type_parameters: list[str] = Field(default_factory=list, alias="typeParameters")
    extends: list[str] = Field(default_factory=list)
    implements: list[str] = Field(default_factory=list)
    annotations: list[AnnotationPayload] = Field(default_factory=list)
    fields: list[FieldPayload] = Field(default_factory=list)
    methods: list[MethodPayload] = Field(default_factory=list)

    _normalize_visibility = field_validator("visibility", mode="before")(_blank_to_none)

    @field_validator("extends", mode="before")
    @classmethod
    def _single_superclass(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class RepositoryPayload(FactsBaseModel):
    name: str
    local_path: str = Field(alias="localPath")
    url: str | None = None
    default_branch: str | None = Field(default=None, alias="defaultBranch")
    commit_hash: str | None = Field(default=None, alias="commitHash")


class SubProjectPayload(FactsBaseModel):
    name: str
    path: str = ""
    project_type: str | None = Field(default=None, alias="projectType")
    build_file: str | None = Field(default=None, alias="buildFile")
    version: str | None = None


class SourceUnitPayload(FactsBaseModel):
    file_path: str = Field(alias="filePath")
    package: str | None = None
    imports: list[ImportPayload] = Field(default_factory=list)
    types: list[TypePayload] = Field(default_factory=list)
    repository: RepositoryPayload | None = None
    sub_project: SubProjectPayload | None = Field(default=None, alias="subProject")

    _normalize_package = field_validator("package", mode="before")(_blank_to_none)
