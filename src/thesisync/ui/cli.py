from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from thesisync.app import sync_thesis_projects
from thesisync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {number}")
    return number


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise thesis projects from Pure")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser(
        "sync",
        help="Fetch, enrich and publish projects, metadata and organizations",
    )
    sync.add_argument(
        "--output-dir",
        type=str,
        help="Directory the JSON artifacts are published into (defaults to SYNC_OUTPUT_DIR)",
    )
    sync.add_argument(
        "--page-size",
        type=_positive_int,
        help="Number of projects to request per listing page (defaults to config)",
    )
    sync.add_argument(
        "--concurrency",
        type=_positive_int,
        help="Number of projects enriched at once (default: sequential)",
    )
    sync.add_argument(
        "--no-geocoding",
        action="store_true",
        help="Skip geocoding and rely on coordinates embedded in organization addresses",
    )
    sync.add_argument(
        "--max-records",
        type=_positive_int,
        help="Stop paging after this many source records (smoke runs only)",
    )
    sync.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except SystemExit as exc:
        # argparse exits 2 on usage errors and 0 for --help
        sys.exit(EXIT_OK if exc.code in (0, None) else EXIT_USAGE)

    if parsed_args.verbose:
        configure_logging(level=logging.DEBUG, force=True)

    try:
        if parsed_args.command == "sync":
            sync_thesis_projects(
                output_dir=parsed_args.output_dir,
                page_size=parsed_args.page_size,
                concurrency=parsed_args.concurrency,
                geocoding=False if parsed_args.no_geocoding else None,
                max_records=parsed_args.max_records,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError as exc:
        log.error(f"Configuration error: {exc}")  # noqa: TRY400
        sys.exit(EXIT_USAGE)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(EXIT_FAILURE)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(EXIT_OK)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
