"""Read JSON Lines fact documents from disk."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import SourceUnitPayload
from .translator import translate_source_unit

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from structgraph.domain.classification import SourceUnit

log = getLogger(__name__)


class FactDocumentReader:
    """Iterate the source units of a ``.jsonl`` file, one document per line.

    Blank lines are ignored. Lines that fail validation are logged, recorded
    in ``invalid_lines`` and skipped.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.invalid_lines: list[int] = []

    def __iter__(self) -> Iterator[SourceUnit]:
        self.invalid_lines = []
        with self.path.open(encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    payload = SourceUnitPayload.model_validate_json(line)
                except ValidationError as exc:
                    log.warning(
                        "Skipping invalid fact document %s:%d (%d errors): %s",
                        self.path,
                        line_number,
                        exc.error_count(),
                        exc.errors()[0]["msg"] if exc.errors() else exc,
                    )
                    self.invalid_lines.append(line_number)
                    continue
                yield translate_source_unit(payload)
