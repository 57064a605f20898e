"""Identity errors."""

from __future__ import annotations

from typing import Final

INVALID_ARGUMENT: Final[str] = "INVALID_ARGUMENT"


class InvalidIdentityError(ValueError):
    """Raised when a natural key cannot produce an identifier."""

    code: str = INVALID_ARGUMENT
