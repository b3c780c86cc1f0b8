"""
Structured Logging Configuration
Event-style logging with structlog; markup and prompts are clipped and
credentials masked before anything is rendered.
"""

import logging
import sys
from typing import Any, MutableMapping

import structlog
from pythonjsonlogger import jsonlogger


# Longest string value kept in a log event
MAX_FIELD_CHARS = 200

_SECRET_KEYS = ("api_key", "apikey", "token", "secret", "password")


def _mask_secrets(logger: Any, method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in event_dict.items():
        if value and key.lower().endswith(_SECRET_KEYS):
            event_dict[key] = "***"
    return event_dict


def _clip_long_values(logger: Any, method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Generated markup can run to kilobytes; keep events one screen wide."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
            event_dict[key] = f"{value[:MAX_FIELD_CHARS]}... ({len(value)} chars)"
    return event_dict


def _stdlib_handler(json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    return handler


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging for the service.

    Logs go to stderr so stdout stays free for responses.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render one JSON object per line instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, handlers=[_stdlib_handler(json_logs)], force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _mask_secrets,
            _clip_long_values,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger for a module (pass ``__name__``)."""
    return structlog.get_logger(name)


class LogContext:
    """
    Bind context (e.g. request id) to all log messages in scope.

    Restores whatever was bound before on exit, so scopes nest.
    """

    def __init__(self, **kwargs: Any):
        self.context = kwargs
        self._tokens: Any = None

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)
