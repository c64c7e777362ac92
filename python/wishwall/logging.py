"""Structured logging for the admin API.

Every entry is one JSON object carrying the event name, level, logger,
ISO timestamp and whatever request context is bound:
- request_id: correlation id (also echoed as X-Request-ID)
- user_id: the verified admin, once require_admin has run
- path / method: the request line, never the query string

Request context lives in structlog's contextvars store, so it follows the
request across the threadpool boundary FastAPI uses for sync handlers.

Usage:
    logger = get_logger(__name__)
    logger.info("message_decided", message_id=str(message_id))
"""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars

_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structlog and route stdlib logging through the same renderer.

    Args:
        json_format: JSON lines if True, otherwise the colored console renderer.
        level: Root log level.
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    renderer = (
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_request_context(
    request_id: str | None,
    user_id: str | None = None,
    path: str | None = None,
    method: str | None = None,
) -> None:
    """Bind request context for all log entries in the current context.

    Fields passed as None are left as they are.
    """
    fields = {"request_id": request_id, "user_id": user_id, "path": path, "method": method}
    bind_contextvars(**{key: value for key, value in fields.items() if value is not None})


def clear_request_context() -> None:
    clear_contextvars()


def get_request_id() -> str | None:
    """The request id bound to the current context, if any."""
    return get_contextvars().get("request_id")
