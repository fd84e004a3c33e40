"""Logging for fintrack.

Store and backend modules call get_logger(__name__) and never attach
handlers. The CLI picks a level with resolve_level() and calls
configure_logging() once at startup.
"""

import logging
import os
import sys
from typing import IO

LOG_LEVEL_ENV = "FINTRACK_LOG_LEVEL"
DEFAULT_LEVEL = logging.WARNING

_PKG_LOGGER_NAME = "fintrack"
_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_configured = False


def level_from_name(name: str | None) -> int | None:
    """Look up a standard level name such as "debug" or "WARNING".

    Returns:
        The numeric level, or None if the name is empty or unknown.
    """
    if not name:
        return None
    return logging.getLevelNamesMapping().get(name.strip().upper())


def resolve_level(configured: str | None = None) -> int:
    """Choose the log level for this run.

    FINTRACK_LOG_LEVEL wins over the configured value. Unknown names are
    ignored.

    Args:
        configured: The log_level from the config file, if any.

    Returns:
        Numeric logging level.
    """
    for candidate in (os.environ.get(LOG_LEVEL_ENV), configured):
        level = level_from_name(candidate)
        if level is not None:
            return level
    return DEFAULT_LEVEL


def configure_logging(level: int = DEFAULT_LEVEL, stream: IO[str] | None = None) -> None:
    """Attach a single stream handler to the fintrack logger.

    Only the first call has any effect.

    Args:
        level: Numeric logging level.
        stream: Output stream. Defaults to stderr.
    """
    global _configured
    if _configured:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.handlers = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger, silent until configure_logging() runs."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
