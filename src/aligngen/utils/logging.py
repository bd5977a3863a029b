"""Logging configuration and utilities.

All loggers live under the ``aligngen`` namespace. The library never
installs handlers on import; entry points call :func:`setup_logging`.
"""

from __future__ import annotations

import logging
import os

_ROOT_LOGGER = "aligngen"


def setup_logging(level: str | None = None) -> None:
    """Configure the ``aligngen`` logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to ``$ALIGNGEN_LOG_LEVEL`` or WARNING.
    """
    if level is None:
        level = os.environ.get("ALIGNGEN_LOG_LEVEL", "WARNING")

    log_level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name under the ``aligngen`` namespace."""
    if name == _ROOT_LOGGER or name.startswith(f"{_ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
