"""
Structured JSON logging for the logsage package.

Every logger handed out by ``get_logger`` is a child of the ``logsage`` root
logger, which owns the single stdout handler. Records carry optional
structured keys passed through ``extra=``:

    logger = get_logger(__name__)
    logger.info("Search complete", extra={"source": "elasticsearch", "action": "search"})
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

ROOT_LOGGER = "logsage"

STRUCTURED_KEYS = ("source", "action", "extra", "agent_name", "tool", "tokens", "duration_ms")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key)) for key in STRUCTURED_KEYS
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[1]:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach the JSON handler to the package root logger and set its level.

    ``level`` falls back to the LOG_LEVEL environment variable, then INFO.
    Safe to call more than once; only the level changes on later calls.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
        root.propagate = False
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, name, logging.INFO))
    return root


def get_logger(name: str) -> logging.Logger:
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    if not logging.getLogger(ROOT_LOGGER).handlers:
        configure_logging()
    return logging.getLogger(name)
