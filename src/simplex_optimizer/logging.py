"""Logging helpers for the simplex optimizer.

Every module logs through ``logging.getLogger(__name__)``; these helpers only
attach a single stderr handler to the package logger and adjust its level.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "simplex_optimizer"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``simplex_optimizer`` namespace.

    Example:
        >>> from simplex_optimizer.logging import get_logger
        >>> logger = get_logger("lp.simplex")
        >>> logger.name
        'simplex_optimizer.lp.simplex'
    """
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Set the level of the package logger and its handlers."""
    level = _coerce_level(level)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install one stream handler on the package logger, replacing earlier ones.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. If None, uses ``DEFAULT_FORMAT``.
        stream: Output stream (default: sys.stderr).
    """
    level = _coerce_level(level)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root
