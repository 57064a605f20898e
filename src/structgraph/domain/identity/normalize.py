"""Normalization of the natural-key parts that feed identifiers."""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_TYPE_NAME: Final[str] = "Object"
SHORT_HASH_BYTES: Final[int] = 4

_PACKAGE_SEPARATORS = re.compile(r"[\s\\/]+")
_REPEATED_DOTS = re.compile(r"\.{2,}")
_REPEATED_SLASHES = re.compile(r"/{2,}")
_WHITESPACE = re.compile(r"\s+")


def normalize_package(value: str | None) -> str:
    """Lower-case, dot-separated package name without stray separators."""

    if not value:
        return ""
    text = _PACKAGE_SEPARATORS.sub(".", value.strip().lower())
    text = _REPEATED_DOTS.sub(".", text)
    return text.strip(".")


def normalize_file_path(value: str | None) -> str:
    if not value:
        return ""
    text = _REPEATED_SLASHES.sub("/", value.strip().replace("\\", "/"))
    return text.strip("/")


def normalize_simple_name(value: str | None) -> str:
    if not value:
        return ""
    return _WHITESPACE.sub("_", value.strip())


def normalize_type_name(value: str | None) -> str:
    """Canonical spelling of a type reference.

    Whitespace is dropped, varargs become an array suffix, and generic
    arguments are kept so that ``List<String>`` and ``List<Integer>`` stay
    distinct.
    """

    if not value or not value.strip():
        return DEFAULT_TYPE_NAME
    text = _WHITESPACE.sub("", value)
    if text.endswith("..."):
        text = text[:-3] + "[]"
    return text


def normalize_method_signature(name: str, parameter_types: Iterable[str]) -> str:
    params = ",".join(normalize_type_name(param) for param in parameter_types)
    return f"{normalize_simple_name(name)}({params})"


def short_hash(value: str) -> str:
    """First four bytes of the MD5 digest of ``value``, as lowercase hex."""

    digest = hashlib.md5(value.encode("utf-8"), usedforsecurity=False).digest()
    return digest[:SHORT_HASH_BYTES].hex()
