"""Logging configuration using structlog.

Request, principal and tenant fields are carried in contextvars, so every log
line emitted while serving a request is attributable to a tenant namespace
without passing identifiers around.
"""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Libraries that echo statements or bound values at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "asyncpg", "httpx", "httpcore")


def _renderer(debug: bool) -> structlog.typing.Processor:
    if debug:
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def setup_logging(debug: bool = False) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: If True, use colored console output. If False, use JSON for production.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(debug),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(
    request_id: str | None, method: str | None = None, path: str | None = None
) -> None:
    """Bind the correlation ID (and route, when known) to subsequent log calls."""
    if request_id:
        bind_contextvars(request_id=request_id)
    if method and path:
        bind_contextvars(method=method, path=path)


def bind_user_context(user_id: str) -> None:
    """Bind the authenticated principal to all subsequent log calls."""
    bind_contextvars(user_id=str(user_id))


def bind_tenant_context(tenant_id: str, schema_name: str, user_id: str | None = None) -> None:
    """Bind tenant scope once the request has passed the tenant gate.

    Args:
        tenant_id: The verified tenant identifier.
        schema_name: The resolved namespace of that tenant.
        user_id: Optional principal identifier.
    """
    bind_contextvars(tenant_id=str(tenant_id), schema_name=schema_name)
    if user_id:
        bind_contextvars(user_id=str(user_id))


def clear_request_context() -> None:
    """Clear all request-scoped context."""
    clear_contextvars()
