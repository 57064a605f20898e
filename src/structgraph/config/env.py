"""Typed readers for ``STRUCTGRAPH_*`` and ``DATABASE_URI`` variables.

Blank values count as unset everywhere, so an empty line in a ``.env`` file
never overrides a default.
"""

from __future__ import annotations

import os

from .errors import ConfigurationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def env_text(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_flag(name: str, *, default: bool) -> bool:
    value = env_text(name)
    if value is None:
        return default
    normalized = value.lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(name, f"expected a boolean flag, got {value!r}")


def env_list(name: str) -> tuple[str, ...] | None:
    """Comma-separated values, or ``None`` when the variable is unset."""

    value = env_text(name)
    if value is None:
        return None
    return tuple(item.strip() for item in value.split(",") if item.strip())
