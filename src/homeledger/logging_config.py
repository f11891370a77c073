"""Logging setup for the homeledger logger hierarchy."""

__all__ = ["LOG_FORMAT", "LOG_LEVEL_ENV_VAR", "configure_logging", "reset_logging"]

import logging
import os
import sys
import threading
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL_ENV_VAR = "HOMELEDGER_LOG_LEVEL"

_LOGGER_PREFIX = "homeledger"
_lock = threading.Lock()
_handler: Optional[logging.Handler] = None


def _resolve_level(level: "int | str | None") -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(level: "int | str | None" = None, stream: Any = None) -> None:
    """Send homeledger log records to stderr (idempotent).

    Args:
        level: Level name or number; falls back to HOMELEDGER_LOG_LEVEL, then WARNING
        stream: Stream for the handler, stderr by default

    Raises:
        ValueError: If the level name is unknown
    """
    global _handler
    resolved = _resolve_level(level)

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(resolved)

    with _lock:
        if _handler is not None:
            # sys.stderr may have been replaced since the first call
            _handler.setStream(stream or sys.stderr)
            return
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(_handler)
        root_logger.propagate = False


def reset_logging() -> None:
    """Remove the handler installed by configure_logging. For tests."""
    global _handler
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        if _handler is not None:
            root_logger.removeHandler(_handler)
            _handler = None
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
