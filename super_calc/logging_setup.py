"""Logging setup: stdlib logging rendered through rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "super_calc"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a RichHandler (stderr) to the package logger.

    Safe to call more than once; the handler is installed only once.

    Args:
        level: Level name, e.g. "DEBUG".

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger
