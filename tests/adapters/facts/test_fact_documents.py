from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from structgraph.adapters.facts import (
    FactDocumentReader,
    SourceUnitPayload,
    translate_source_unit,
)
from structgraph.domain.model import DeclarationKind

if TYPE_CHECKING:
    from pathlib import Path

DOCUMENT: dict[str, object] = {
    "filePath": "src/main/java/com/example/UserService.java",
    "package": "com.example",
    "imports": [
        "java.util.List",
        "import java.util.*;",
        "static org.junit.Assert.assertEquals",
        {"name": "org.slf4j.Logger"},
    ],
    "types": [
        {
            "name": "UserService",
            "kind": "record",
            "extends": "BaseService<User>",
            "typeParameters": ["T"],
            "lineStart": 5,
            "lineEnd": 80,
            "annotations": ["@Service"],
            "fields": [
                {
                    "name": "names",
                    "type": "List<String>",
                    "visibility": " ",
                    "instantiations": ["ArrayList<>"],
                }
            ],
            "methods": [
                {
                    "name": "find",
                    "returnType": "Optional<User>",
                    "parameters": [{"name": "ids", "type": "Long", "varargs": True}],
                    "annotations": [
                        {"name": "GetMapping", "value": '"/users"', "attributes": {"limit": 10}}
                    ],
                    "calls": [{"name": "of", "scope": "List", "argumentCount": 1}],
                    "fieldAccesses": ["names"],
                }
            ],
        }
    ],
    "repository": {"name": "shop", "localPath": "/work/shop", "commitHash": "abc123"},
    "subProject": {"name": "core", "path": "core", "projectType": "maven"},
}


def test_payload_accepts_compact_forms() -> None:
    payload = SourceUnitPayload.model_validate(DOCUMENT)

    imports = [(i.name, i.is_static, i.is_wildcard) for i in payload.imports]
    assert imports == [
        ("java.util.List", False, False),
        ("java.util", False, True),
        ("org.junit.Assert.assertEquals", True, False),
        ("org.slf4j.Logger", False, False),
    ]
    type_payload = payload.types[0]
    assert type_payload.extends == ["BaseService<User>"]
    assert type_payload.annotations[0].name == "Service"
    assert type_payload.fields[0].visibility is None
    assert type_payload.methods[0].annotations[0].attributes == {"limit": "10"}


def test_payload_rejects_unknown_declaration_kind() -> None:
    document = {"filePath": "A.java", "types": [{"name": "A", "kind": "module"}]}

    with pytest.raises(ValidationError):
        SourceUnitPayload.model_validate(document)


def test_translate_source_unit() -> None:
    unit = translate_source_unit(SourceUnitPayload.model_validate(DOCUMENT))

    assert unit.package_name == "com.example"
    assert unit.repository is not None
    assert unit.repository.commit_hash == "abc123"
    assert unit.sub_project is not None
    assert unit.sub_project.project_type == "maven"

    (declared,) = unit.types
    assert declared.kind is DeclarationKind.CLASS
    assert declared.span.line_start == 5
    assert declared.type_parameters == ("T",)
    field = declared.fields[0]
    assert field.instantiations[0].type_name == "ArrayList<>"
    method = declared.methods[0]
    assert method.parameter_types == ("Long[]",)
    assert method.calls[0].argument_count == 1
    assert method.field_accesses[0].name == "names"
    assert method.annotations[0].value == '"/users"'


def test_reader_skips_blank_and_invalid_lines(tmp_path: Path) -> None:
    path = tmp_path / "facts.jsonl"
    lines = [
        json.dumps(DOCUMENT),
        "",
        "{not json",
        json.dumps({"package": "missing.file.path"}),
        json.dumps({"filePath": "Other.java"}),
    ]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    reader = FactDocumentReader(path)
    units = list(reader)

    assert [unit.file_path for unit in units] == [
        "src/main/java/com/example/UserService.java",
        "Other.java",
    ]
    assert reader.invalid_lines == [3, 4]
