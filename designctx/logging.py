"""Logging utilities for designctx.

Per-node extraction and scoring logs are chatty on large design trees, so the
``extractors`` and ``analyzers`` loggers stay at WARNING unless verbose output
is requested.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

_LOGGER_NAME = "designctx"
_CONSOLE_FORMAT = "[designctx] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
NOISY_LOGGERS: tuple[str, ...] = ("extractors", "analyzers")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the designctx hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Install console (and optional file) handlers on the designctx logger.

    ``quiet`` names child loggers held at WARNING in non-verbose mode; verbose
    mode resets them so they inherit DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeat CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    for name in quiet:
        get_logger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)

    return logger


__all__ = ["NOISY_LOGGERS", "configure_logging", "get_logger"]
