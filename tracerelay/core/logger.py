"""Logger configuration for tracerelay.

All modules log through ``logging.getLogger(__name__)`` under the
``tracerelay`` namespace; this module only configures that namespace.
"""

from __future__ import annotations

import logging
from typing import Literal

LogLevel = Literal["silent", "error", "warn", "info", "debug"]

_ROOT_LOGGER_NAME = "tracerelay"

_LEVELS: dict[str, int] = {
    "silent": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_current_level: LogLevel = "info"
_handler: logging.Handler | None = None


def configure_logger(log_level: LogLevel = "info", prefix: str = "TraceRelay") -> logging.Logger:
    """
    Configure the library logger.

    Args:
        log_level: One of silent, error, warn, info, debug
        prefix: Tag prepended to every message

    Returns:
        The configured ``tracerelay`` logger
    """
    global _handler

    root = logging.getLogger(_ROOT_LOGGER_NAME)

    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(f"[{prefix}] %(levelname)s %(name)s: %(message)s"))
    root.addHandler(_handler)
    root.propagate = False

    set_log_level(log_level)
    return root


def set_log_level(log_level: LogLevel) -> None:
    """Change the level of the library logger."""
    global _current_level

    if log_level not in _LEVELS:
        raise ValueError(f"Invalid log level: {log_level}. Expected one of {sorted(_LEVELS)}")

    _current_level = log_level
    logging.getLogger(_ROOT_LOGGER_NAME).setLevel(_LEVELS[log_level])


def get_log_level() -> LogLevel:
    return _current_level
