"""Logging setup for the command line entrypoint."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Route ``babel_io`` loggers to stderr through rich; return the package logger."""
    logger = logging.getLogger("babel_io")
    for handler in list(logger.handlers):
        if getattr(handler, "_babel_io", False):
            logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler._babel_io = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
