"""Parsing of type spellings such as ``Map<String, List<Integer>>[]``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from structgraph.domain.identity import normalize_type_name

PRIMITIVE_TYPES: Final[frozenset[str]] = frozenset(
    {"int", "long", "double", "float", "boolean", "char", "byte", "short", "void"}
)

_TOKEN = re.compile(r"\.\.\.|\[\s*\]|[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*|[?<>,&]")


@dataclass(frozen=True, slots=True)
class TypeRef:
    name: str
    arguments: tuple[TypeRef, ...] = ()
    array_depth: int = 0
    wildcard: bool = False
    # "extends" or "super" for bounded wildcards
    bound: str = ""

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2]

    @property
    def is_primitive(self) -> bool:
        return self.name in PRIMITIVE_TYPES

    @property
    def is_unbounded_wildcard(self) -> bool:
        return self.wildcard and self.name == "?"

    @property
    def text(self) -> str:
        """Normalized spelling, whitespace free."""

        if self.is_unbounded_wildcard:
            return "?"
        rendered = self.name
        if self.arguments:
            rendered += "<" + ",".join(arg.text for arg in self.arguments) + ">"
        if self.wildcard:
            rendered = f"?{self.bound}{rendered}"
        return normalize_type_name(rendered + "[]" * self.array_depth)


def parse_type(text: str | None) -> TypeRef | None:
    """Parse a type spelling; returns ``None`` for blank or unparseable input."""

    if not text or not text.strip():
        return None
    tokens = _TOKEN.findall(text)
    if not tokens:
        return None
    ref, _ = _parse(tokens, 0)
    return ref


def _parse(tokens: list[str], pos: int) -> tuple[TypeRef | None, int]:
    if pos >= len(tokens):
        return None, pos

    token = tokens[pos]
    if token == "?":
        pos += 1
        if pos < len(tokens) and tokens[pos] in ("extends", "super"):
            keyword = tokens[pos]
            bound, pos = _parse(tokens, pos + 1)
            if bound is not None:
                return (
                    TypeRef(bound.name, bound.arguments, bound.array_depth, True, keyword),
                    pos,
                )
        return TypeRef("?", wildcard=True), pos

    if token in ("<", ">", ",", "&", "...") or token.startswith("["):
        return None, pos + 1

    name = token
    pos += 1
    arguments: list[TypeRef] = []
    if pos < len(tokens) and tokens[pos] == "<":
        pos += 1
        while pos < len(tokens) and tokens[pos] != ">":
            if tokens[pos] in (",", "&"):
                pos += 1
                continue
            argument, pos = _parse(tokens, pos)
            if argument is not None:
                arguments.append(argument)
        pos += 1

    depth = 0
    while pos < len(tokens) and (tokens[pos] == "..." or tokens[pos].startswith("[")):
        depth += 1
        pos += 1
    return TypeRef(name, tuple(arguments), depth), pos
