"""Logging configuration: rich console output plus an optional log file."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "libbuild"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _is_ours(handler: logging.Handler) -> bool:
    return getattr(handler, "_libbuild_handler", False)


def setup_logging(
    level: str | int = "INFO",
    log_file: Path | None = None,
    rich_tracebacks: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """
    Configure the `libbuild` logger.

    Safe to call more than once: handlers installed by a previous call are
    replaced, not stacked.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(min(level, logging.DEBUG) if log_file is not None else level)

    for handler in [h for h in logger.handlers if _is_ours(h)]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=rich_tracebacks,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler._libbuild_handler = True
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        file_handler._libbuild_handler = True
        logger.addHandler(file_handler)

    return logger
