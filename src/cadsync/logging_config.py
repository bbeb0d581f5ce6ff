"""Logging setup for cadsync.

Library modules only create loggers through get_logger; the
CLI calls configure_logging once to attach a handler to the ``cadsync``
namespace.
"""

__all__ = [
    "StructuredFormatter",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, Optional, TextIO

_LOGGER_PREFIX = "cadsync"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Structured extra data passed through ``extra=``
        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the cadsync namespace."""
    if name == _LOGGER_PREFIX or name.startswith(f"{_LOGGER_PREFIX}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(
    level: str = "WARNING", json_output: bool = False, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Attach a single stream handler to the cadsync root logger.

    Calling it again replaces the previous handler instead of stacking a new
    one.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Emit one JSON object per line instead of plain text
        stream: Target stream, stderr by default

    Raises:
        ValueError: If level is not a known level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    root = logging.getLogger(_LOGGER_PREFIX)
    reset_logging()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)
    root.setLevel(numeric_level)
    root.propagate = False
    return root


def reset_logging() -> None:
    """Remove handlers installed by configure_logging."""
    root = logging.getLogger(_LOGGER_PREFIX)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    root.propagate = True
