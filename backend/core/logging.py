"""Structured Logging

structlog on top of stdlib logging, so uvicorn and library records share
one renderer. Development gets colored console lines, production
(``LOG_JSON``) one JSON object per event.

Every event carries the service name and version plus whatever was bound
with ``bind_context`` (the HTTP middleware binds the correlation id).
Credentials are redacted and long strings, such as feed descriptions, are
clipped before rendering.
"""
import logging
import sys
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "feed-validator"
SERVICE_VERSION = "0.1.0"

SENSITIVE_KEYS = frozenset({"password", "token", "secret", "authorization", "cookie", "api_key", "x-api-key"})
MAX_VALUE_LENGTH = 500

_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def _scrub(obj, depth: int = 0):
    if depth > 5:
        return obj
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in SENSITIVE_KEYS else _scrub(v, depth + 1)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_scrub(item, depth + 1) for item in obj]
    if isinstance(obj, str) and len(obj) > MAX_VALUE_LENGTH:
        return f"{obj[:MAX_VALUE_LENGTH]}...[{len(obj) - MAX_VALUE_LENGTH} more chars]"
    return obj


def _scrub_event(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Redact credentials and clip oversized values."""
    return _scrub(event_dict)


def _add_service_info(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", SERVICE_VERSION)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_info,
        _scrub_event,
    ]


def configure_logging(level: str = "INFO", json_logs: bool = False, stream=None) -> None:
    """Install structlog and a single root handler.

    Args:
        level: Root log level name; unknown names fall back to INFO.
        json_logs: JSON lines instead of colored console output.
        stream: Handler stream, stdout by default. The CLI passes stderr so
            reports on stdout stay machine-readable.
    """
    shared = _shared_processors()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
    )

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdlib records (uvicorn, httpx) go through the same renderer
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).handlers = []
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    return str(uuid4())[:8]


def bind_context(**kwargs) -> None:
    """Attach key-value pairs to every event logged from this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LoggerRegistry:
    """One cached logger per area, named ``feed.<area>``."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"feed.{name}")
        return cls._loggers[name]


def api_logger() -> structlog.stdlib.BoundLogger:
    """HTTP layer: requests, rejections, batch limits."""
    return LoggerRegistry.get("api")


def validation_logger() -> structlog.stdlib.BoundLogger:
    """Record and batch validation."""
    return LoggerRegistry.get("validation")
