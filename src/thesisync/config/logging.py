"""Logging setup for the sync command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for a sync run.

    ``force=True`` replaces existing handlers, which ``--verbose`` relies on to drop to
    DEBUG after the default INFO setup.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    # httpx logs every request at INFO; page progress is reported by the fetcher instead
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
