"""Logging configuration for CLI sessions."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "proberunner"


def setup_logging(debug: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the package logger.

    Without ``debug`` only warnings and errors reach the terminal.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=debug,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    rich_handler.setLevel(level)
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)
    logger.propagate = False
    return logger
