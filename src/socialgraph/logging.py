"""
Centralized logging configuration using structlog

Request-scoped fields (``request_id``, ``graphql_operation``) are kept in
structlog's contextvars and merged into every event logged while a request is
being handled.
"""

import logging
import secrets
import sys
from typing import TextIO

import structlog


def configure_logging(debug: bool = False, stream: TextIO | None = None) -> None:
    """Configure structlog on top of the standard library logging module.

    Args:
        debug: If True, use human-readable console output. If False, use JSON.
        stream: Where log lines go (default: stdout). Commands whose stdout is
            a machine-readable result pass ``sys.stderr``.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        stream=stream or sys.stdout,
        format="%(message)s",
        force=True,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance (typically ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def set_request_context(request_id: str | None = None, operation: str | None = None) -> str:
    """Bind the request id (generated when missing) and GraphQL operation name.

    Returns:
        The request ID now in effect
    """
    request_id = request_id or secrets.token_urlsafe(10)
    structlog.contextvars.bind_contextvars(request_id=request_id)
    if operation is not None:
        structlog.contextvars.bind_contextvars(graphql_operation=operation)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
