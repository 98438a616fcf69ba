# src/flipforge/adapters/logging_utils.py
import json
import logging
import sys
from datetime import datetime, timezone

from .config import config

APP_NAME = "flipforge"

# keys every record carries; context may not overwrite them
_BASE_KEYS = frozenset({"ts", "level", "logger", "message", "app", "env", "exc"})


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; structured fields ride under extra={"context": {...}}."""

    def format(self, record):
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "app": APP_NAME,
            "env": config.ENV,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            for key, value in ctx.items():
                payload[f"ctx_{key}" if key in _BASE_KEYS else key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    # stderr keeps CLI stdout clean for JSON output
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL.upper())
        logger.propagate = False
    return logger
