"""Application configuration helpers."""

from __future__ import annotations

from .classification import (
    DEFAULT_BUILTIN_TYPES,
    DEFAULT_EXTERNAL_PREFIXES,
    ClassificationConfig,
    get_classification_config,
)
from .env import env_flag, env_list, env_text
from .errors import ConfigurationError
from .logging import DECISION_LOGGER, configure_logging
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .storage import DATABASE_FILENAME, DatabaseConfig, get_data_dir, get_database_config

__all__ = [
    "DATABASE_FILENAME",
    "DECISION_LOGGER",
    "DEFAULT_BUILTIN_TYPES",
    "DEFAULT_EXTERNAL_PREFIXES",
    "ClassificationConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ReconciliationConfig",
    "configure_logging",
    "env_flag",
    "env_list",
    "env_text",
    "get_classification_config",
    "get_data_dir",
    "get_database_config",
    "get_reconciliation_config",
]
