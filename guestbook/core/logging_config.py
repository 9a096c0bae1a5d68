"""
Logging setup for the guestbook service.

Production writes one JSON object per line so entries can be shipped to a log
aggregator as-is. Every other environment gets a single-line text format.
In both, entries emitted while a request is being handled carry that
request's id.
"""
import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from guestbook.core.config import settings

# Set per request by RequestLoggingMiddleware
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes copied from ``extra=`` into JSON entries. Anything else passed
# through extra (an email, a comment body) stays out of the logs.
_STRUCTURED_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_host",
    "storage",
    "error_id",
)

TEXT_FORMAT = "%(asctime)s [%(request_id)s] %(name)s %(levelname)s: %(message)s"


class RequestIdFilter(logging.Filter):
    """Stamp each record with the current request id ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_context.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """Render a record as a JSON object with a fixed set of top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_context.get()
        if request_id:
            entry["request_id"] = request_id

        entry.update(
            {
                name: getattr(record, name)
                for name in _STRUCTURED_FIELDS
                if hasattr(record, name)
            }
        )

        if record.levelno >= logging.ERROR:
            entry["source"] = f"{record.pathname}:{record.lineno}"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _library_levels(debug: bool) -> Dict[str, int]:
    # SQL statements only show up when debugging; access lines are
    # duplicated by RequestLoggingMiddleware, so they are muted then too.
    return {
        "uvicorn.access": logging.WARNING if debug else logging.INFO,
        "sqlalchemy.engine": logging.INFO if debug else logging.WARNING,
    }


def setup_logging() -> None:
    """
    Apply the logging configuration derived from ``settings``.

    ``LOG_LEVEL`` names the level for the root and ``guestbook`` loggers;
    an unrecognised name falls back to INFO.
    """
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    formatter = "json" if settings.ENV == "production" else "default"

    loggers: Dict[str, Dict[str, Any]] = {
        "guestbook": {"level": level, "handlers": ["console"], "propagate": False},
    }
    for name, library_level in _library_levels(settings.DEBUG).items():
        loggers[name] = {
            "level": library_level,
            "handlers": ["console"],
            "propagate": False,
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"request_id": {"()": RequestIdFilter}},
            "formatters": {
                "default": {"format": TEXT_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {"()": JSONFormatter},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter,
                    "filters": ["request_id"],
                    "stream": sys.stdout,
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }
    )
