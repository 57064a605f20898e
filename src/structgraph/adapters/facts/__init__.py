"""Front-end fact documents: schema, translation and reading."""

from __future__ import annotations

from .reader import FactDocumentReader
from .schema import SourceUnitPayload
from .translator import translate_source_unit

__all__ = ["FactDocumentReader", "SourceUnitPayload", "translate_source_unit"]
