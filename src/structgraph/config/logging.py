"""Console logging for the structgraph command line."""

from __future__ import annotations

import logging
from typing import Final

# per-entity INSERT/UPDATE/SKIP decisions are logged at DEBUG here
DECISION_LOGGER: Final[str] = "structgraph.domain.reconciliation"


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Log INFO and above to stderr.

    ``verbose`` lowers only the reconciliation logger to DEBUG so every upsert
    decision is printed without also enabling debug output from SQLAlchemy.
    """

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    logging.getLogger(DECISION_LOGGER).setLevel(logging.DEBUG if verbose else logging.NOTSET)
