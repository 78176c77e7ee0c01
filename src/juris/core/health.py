"""Health check endpoint with dependency validation and caching."""

import time
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.juris.core.db import get_session
from src.juris.core.redis import get_redis

_health_cache: dict[str, Any] | None = None
_health_cache_time: float = 0
HEALTH_CACHE_TTL = 10  # seconds


def reset_health_cache() -> None:
    """Reset health cache (for testing)."""
    global _health_cache, _health_cache_time
    _health_cache = None
    _health_cache_time = 0


async def check_health() -> dict[str, Any]:
    """Probe PostgreSQL and Redis.

    The database is required; Redis only backs the provisioned cache, so its
    absence degrades the status without failing it. Error details are reduced
    to exception types so connection strings never appear in the payload.
    """
    health_status: dict[str, Any] = {
        "status": "healthy",
        "database": "unknown",
        "redis": "not_configured",
        "cached": False,
        "timestamp": time.time(),
    }

    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
        health_status["database"] = "healthy"
    except (SQLAlchemyError, OSError) as e:
        health_status["database"] = f"unhealthy: {type(e).__name__}"
        health_status["status"] = "unhealthy"

    redis = await get_redis()
    if redis:
        try:
            await redis.ping()  # type: ignore[misc]
            health_status["redis"] = "healthy"
        except (RedisError, OSError) as e:
            health_status["redis"] = f"unhealthy: {type(e).__name__}"
            if health_status["status"] == "healthy":
                health_status["status"] = "degraded"

    return health_status


def setup_health_endpoint(app: FastAPI) -> None:
    """Configure the health check endpoint."""

    @app.get("/health", tags=["health"])
    async def health() -> JSONResponse:
        """Health check with dependency validation and caching."""
        global _health_cache, _health_cache_time

        now = time.time()
        if _health_cache and (now - _health_cache_time) < HEALTH_CACHE_TTL:
            cached_response = _health_cache.copy()
            cached_response["cached"] = True
            cached_response["cache_age_seconds"] = round(now - _health_cache_time, 1)
            status_code = 503 if cached_response["status"] == "unhealthy" else 200
            return JSONResponse(content=cached_response, status_code=status_code)

        health_status = await check_health()
        _health_cache = health_status
        _health_cache_time = now

        status_code = 503 if health_status["status"] == "unhealthy" else 200
        return JSONResponse(content=health_status, status_code=status_code)
