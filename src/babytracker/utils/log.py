"""
Structured logging helpers for the BabyTracker application.

Every log line is a single JSON document with an ``event`` name and a UTC
timestamp, so CloudWatch Logs Insights can filter on fields directly.

Functions:
    get_logger: Return the package logger configured from LOG_LEVEL
    log_event: Emit a structured JSON event through a logger
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional

_ROOT_LOGGER_NAME = "babytracker"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger under the ``babytracker`` namespace.

    The package logger gets a stream handler and its level from the
    ``LOG_LEVEL`` environment variable the first time it is requested.
    Lambda forwards stderr to CloudWatch, so no other sink is needed.

    Args:
        name: Optional child logger name (usually ``__name__``)

    Returns:
        Configured logger instance
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        root.addHandler(handler)
        root.propagate = False
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    # Modules imported through the src/ directory carry a "src." prefix
    if name and name.startswith("src."):
        name = name[len("src."):]
    if not name or name == _ROOT_LOGGER_NAME:
        return root
    if not name.startswith(_ROOT_LOGGER_NAME + "."):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any
) -> None:
    """
    Emit a structured JSON log event.

    Args:
        logger: Logger to write through
        event: Upper-case event name, e.g. ``API_REQUEST``
        level: Logging level for the record
        **fields: Additional JSON-serializable fields

    Example:
        >>> log_event(logger, "PROFILE_DELETED", profileId="baby_123", entries=4)
    """
    payload = {
        "event": event,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, default=str))
