"""Centralized logging configuration.

Every record carries the id of the HTTP request it was emitted under,
so gateway and adapter lines can be tied back to one description call.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

from app.core.config import settings

NO_REQUEST_ID = "-"

# Set by RequestLoggingMiddleware for the lifetime of one request
request_id_var: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` from the current request context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_data["exception"] = self.formatException(record.exc_info)
        request_id = getattr(record, "request_id", NO_REQUEST_ID)
        if request_id != NO_REQUEST_ID:
            log_data["request_id"] = request_id
        if hasattr(record, "provider"):
            log_data["provider"] = record.provider
        return json.dumps(log_data, ensure_ascii=False)


def setup_logging() -> None:
    """Install one stdout handler on the root logger (text, or JSON when LOG_JSON=true)."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())

    if settings.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root.addHandler(handler)

    # httpx logs full request URLs at INFO, and image URLs may carry signed tokens
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
