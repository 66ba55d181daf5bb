"""Logging setup for the CLI.

The library modules only create loggers (`logging.getLogger(__name__)`);
handlers are installed here, at the entry point.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING") -> None:
    """Route log records to stderr through Rich.

    Unknown level names fall back to WARNING.
    """

    numeric = getattr(logging, level.strip().upper(), None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    logging.basicConfig(
        level=numeric,
        format="%(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
        force=True,
    )
    # httpx/httpcore are chatty at DEBUG; keep them one notch quieter.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(numeric, logging.INFO))
