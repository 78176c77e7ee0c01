"""Database engine management.

One pooled asyncpg engine serves both the public registry and every tenant
namespace. Tenant scoping happens per transaction (see session.py), never per
connection, so pooled connections can be shared freely across tenants.
"""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.juris.core.config import get_settings

_engine: AsyncEngine | None = None


def _ssl_context(mode: str) -> ssl.SSLContext | None:
    """Map a libpq-style sslmode onto an SSLContext for asyncpg."""
    if mode == "disable":
        return None
    context = ssl.create_default_context()
    if mode in ("prefer", "require"):
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif mode in ("verify-ca", "verify-full"):
        context.check_hostname = mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    return context


def _connect_args() -> dict[str, Any]:
    settings = get_settings()
    connect_args: dict[str, Any] = {
        "statement_cache_size": settings.database_statement_cache_size,
        # Driver-level backstop behind the per-round-trip asyncio timeout
        "command_timeout": settings.database_statement_timeout_seconds,
        "server_settings": {"application_name": settings.app_name},
    }
    context = _ssl_context(settings.database_ssl_mode)
    if context is not None:
        connect_args["ssl"] = context
    return connect_args


def get_engine() -> AsyncEngine:
    """Get or create the shared engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            connect_args=_connect_args(),
        )
    return _engine


async def dispose_engine() -> None:
    """Close every pooled connection. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
