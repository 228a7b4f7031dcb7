"""
Logging configuration module for the task tracker.

Every record can carry ``extra_fields``; tracker events use them for the
task or member they touched. Request ids are tracked in a context variable
so every log line emitted while handling a request can be correlated.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional
from uuid import uuid4

request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Extra fields lifted to the top level of JSON lines so log queries can
# select on them directly; everything else lands under "context".
EVENT_FIELDS = ("task_id", "member_id", "operation", "error_code", "storage")


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line for log aggregation.

    Tracker entity fields (see ``EVENT_FIELDS``) are emitted at the top
    level; remaining ``extra_fields`` are grouped under ``context``.
    """

    def __init__(self, service_name: str = "teamtasker", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "service": self.service_name,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.lineno}",
        }

        request_id = request_id_context.get()
        if request_id:
            log_data["request_id"] = request_id

        extra_fields = dict(getattr(record, "extra_fields", None) or {})
        for key in EVENT_FIELDS:
            if key in extra_fields:
                log_data[key] = extra_fields.pop(key)
        if extra_fields:
            log_data["context"] = extra_fields

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Colored single-line formatter for local development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        parts = [
            self.formatTime(record, "%H:%M:%S"),
            f"{color}{record.levelname:8}{self.RESET}",
            f"[{record.name}]",
        ]

        request_id = request_id_context.get()
        if request_id:
            parts.append(f"[req:{request_id[:8]}]")

        parts.append(record.getMessage())

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            parts.append(" ".join(f"{key}={value}" for key, value in extra_fields.items()))

        message = " ".join(parts)
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    log_level: str = "INFO",
    service_name: str = "teamtasker",
    use_json: bool = False,
) -> logging.Logger:
    """
    Configure root logging for the tracker process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Name stamped on JSON lines and used for the service logger
        use_json: Emit JSON lines instead of colored text

    Returns:
        The service logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    formatter: logging.Formatter
    if use_json:
        formatter = StructuredFormatter(service_name, datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = HumanReadableFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Request lines are logged by RequestLoggingMiddleware already
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.setLevel(numeric_level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger for a module, defaulting to the service logger."""
    return logging.getLogger(name or "teamtasker")


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set request ID in context.

    Args:
        request_id: Request ID to set, generates new UUID if None

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = str(uuid4())
    request_id_context.set(request_id)
    return request_id


def get_request_id() -> Optional[str]:
    return request_id_context.get()


def clear_request_id() -> None:
    request_id_context.set(None)
