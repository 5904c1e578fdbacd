"""Console logging for the unitrun CLI.

Log records go to stderr through Rich so they never interleave with the
report written to stdout.
"""
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PROJECT_LOGGER = "unitrun"


def config_console_handler(
    level: int = logging.WARNING, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Return a RichHandler writing to stderr.

    In debug mode the level drops to DEBUG and records show their source path.
    """

    console = Console(color_system="auto" if color else None, stderr=True)
    if debug_mode:
        level = logging.DEBUG
    handler = RichHandler(
        level=level,
        console=console,
        show_time=debug_mode,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    fmt = "%(message)s" if not debug_mode else "%(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt=fmt))
    return handler


def configure_logging(*, verbose: bool = False, color: bool = True) -> logging.Logger:
    """Attach a single console handler to the project logger (idempotent)."""

    logger = logging.getLogger(PROJECT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = config_console_handler(debug_mode=verbose, color=color)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger
