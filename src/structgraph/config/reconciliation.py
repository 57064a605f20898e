"""Reconciliation engine settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from structgraph.domain.model.enums import UpsertMode

from .env import env_flag, env_text
from .errors import ConfigurationError

DEFAULT_EPHEMERAL_MARKERS: Final[tuple[str, ...]] = ("updated", "timestamp", "created_at")


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    mode: UpsertMode = UpsertMode.UPSERT
    audit_enabled: bool = True
    # attribute names containing any of these never make an update significant
    ephemeral_markers: tuple[str, ...] = DEFAULT_EPHEMERAL_MARKERS


def get_reconciliation_config() -> ReconciliationConfig:
    raw_mode = env_text("STRUCTGRAPH_UPSERT_MODE")
    mode = UpsertMode.UPSERT
    if raw_mode is not None:
        try:
            mode = UpsertMode(raw_mode.lower())
        except ValueError as exc:
            choices = ", ".join(m.value for m in UpsertMode)
            raise ConfigurationError(
                "STRUCTGRAPH_UPSERT_MODE", f"expected one of {choices}, got {raw_mode!r}"
            ) from exc
    return ReconciliationConfig(
        mode=mode,
        audit_enabled=env_flag("STRUCTGRAPH_AUDIT_ENABLED", default=True),
    )
