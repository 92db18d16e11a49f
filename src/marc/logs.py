"""Logging helpers using Rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED = False


def setup_logging(debug: bool = False, console: Console | None = None) -> None:
    """Route the ``marc`` loggers through a Rich handler on stderr."""
    global _CONFIGURED
    level = logging.DEBUG if debug else logging.WARNING
    root = logging.getLogger("marc")
    if not _CONFIGURED:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.propagate = False
        _CONFIGURED = True
    root.setLevel(level)
