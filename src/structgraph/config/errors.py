"""Configuration errors."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment variable holds a value structgraph cannot use."""

    def __init__(self, variable: str, message: str) -> None:
        super().__init__(f"{variable}: {message}")
        self.variable = variable
