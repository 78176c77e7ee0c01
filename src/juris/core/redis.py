"""Optional Redis client with lazy connection and graceful fallback.

Redis only backs the provisioned-namespace cache. When it is not configured or
unreachable every caller degrades to hitting PostgreSQL directly.
"""

from redis.asyncio import ConnectionPool, Redis

from src.juris.core.config import get_settings
from src.juris.core.logging import get_logger

logger = get_logger(__name__)

_pool: ConnectionPool | None = None
_redis: Redis | None = None
_connection_attempted: bool = False


async def _discard_partial_client() -> None:
    global _pool, _redis
    if _redis:
        await _redis.aclose()
        _redis = None
    if _pool:
        await _pool.disconnect()
        _pool = None


async def get_redis() -> Redis | None:
    """Get the shared Redis client, or None when Redis is unavailable.

    The first call decides: a failed connection is not retried until
    close_redis() resets the state.
    """
    global _pool, _redis, _connection_attempted

    if _redis is not None:
        return _redis
    if _connection_attempted:
        return None

    _connection_attempted = True
    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured, provisioned-namespace cache disabled")
        return None

    try:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        _redis = Redis(connection_pool=_pool)
        await _redis.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning("Redis connection failed, continuing without cache", error=str(e))
        await _discard_partial_client()
        return None

    logger.info("Redis connected")
    return _redis


async def close_redis() -> None:
    """Close the Redis pool. Called during application shutdown."""
    global _connection_attempted

    if _redis:
        logger.info("Redis connection closed")
    await _discard_partial_client()
    _connection_attempted = False


def reset_redis_state() -> None:
    """Forget the current client without closing it. For tests only."""
    global _pool, _redis, _connection_attempted
    _redis = None
    _pool = None
    _connection_attempted = False
