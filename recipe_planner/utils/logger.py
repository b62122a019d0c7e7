"""Logging for Recipe Planner.

One stdout handler per named logger, text or JSON, chosen from the
environment:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Request context is passed with `extra=` and rendered by both formatters,
e.g. ``logger.info("Plan stored", extra={"user_id": uid, "plan_id": pid})``.
"""

import json
import logging
import os
import sys
from typing import Any

# `extra=` keys carried into formatted output, in display order
CONTEXT_FIELDS = ("user_id", "query", "recipe_id", "plan_id")


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RichTextFormatter(logging.Formatter):
    """Colored single-line output with a level icon and trailing context."""

    STYLES = {
        "DEBUG": ("\033[36m", "🔍"),
        "INFO": ("\033[32m", "ℹ️"),
        "WARNING": ("\033[33m", "⚠️"),
        "ERROR": ("\033[31m", "❌"),
        "CRITICAL": ("\033[35m", "🔥"),
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color, icon = self.STYLES.get(record.levelname, (self.RESET, ""))
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")

        line = f"{icon} {timestamp} {record.levelname:<8} {record.name:<20} {record.getMessage()}"
        context = _context(record)
        if context:
            line += " [" + " ".join(f"{key}={value}" for key, value in context.items()) + "]"

        message = f"{color}{line}{self.RESET}"
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        return message


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, attaching a stdout handler on first use."""
    logger_instance = logging.getLogger(name)
    if logger_instance.handlers:
        return logger_instance

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    use_json = os.getenv("LOG_TYPE", "text").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if use_json else RichTextFormatter())

    logger_instance.setLevel(level)
    logger_instance.addHandler(handler)
    return logger_instance


logger = get_logger("recipe_planner")

# Model and HTTP client libraries log every request at INFO
for _noisy in ("google.genai", "httpx", "aiohttp"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
