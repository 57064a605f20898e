from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from structgraph.app import ingest_fact_file
from structgraph.config import configure_logging
from structgraph.domain.identity import (
    analyze_collision_risk,
    check_operation_id,
    extract_kind,
    validate_id_strict,
)
from structgraph.domain.model import UpsertMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build and maintain a code structure graph")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every reconciliation decision",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Ingest a JSON Lines fact file")
    ingest.add_argument("path", type=Path, help="Fact file, one source unit per line")
    ingest.add_argument(
        "--operation-id",
        type=check_operation_id,
        help="Operation id recorded on audit entries (generated when omitted)",
    )
    ingest.add_argument(
        "--mode",
        type=UpsertMode,
        choices=list(UpsertMode),
        help="Upsert mode (defaults to config)",
    )
    ingest.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the data dir)",
    )

    inspect_id = subparsers.add_parser("inspect-id", help="Validate an entity identifier")
    inspect_id.add_argument("identifier", type=str, help="Identifier to inspect")

    return parser.parse_args(list(argv))


def _inspect_identifier(identifier: str) -> bool:
    kind = extract_kind(identifier)
    if kind is None:
        log.error("Unknown identifier prefix: %s", identifier)
        return False
    validation = validate_id_strict(identifier, kind)
    if not validation.valid:
        log.error("Invalid %s identifier: %s", kind, validation.message)
        return False
    risk = analyze_collision_risk(identifier, kind)
    log.info("Valid %s identifier (collision risk %s: %s)", kind, risk.risk, risk.reason)
    return True


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        if parsed_args.command == "ingest":
            if not parsed_args.path.is_file():
                raise ValueError(f"Fact file not found: {parsed_args.path}")  # noqa: TRY301
            summary = ingest_fact_file(
                parsed_args.path,
                operation_id=parsed_args.operation_id,
                mode=parsed_args.mode,
                database_uri=parsed_args.database_uri,
            )
            if summary.failed_units or summary.rolled_back_units:
                log.warning(
                    "Ingestion incomplete: %d units failed classification, %d rolled back",
                    len(summary.failed_units),
                    summary.rolled_back_units,
                )
                sys.exit(1)
        elif parsed_args.command == "inspect-id":
            if not _inspect_identifier(parsed_args.identifier):
                sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during ingestion")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
