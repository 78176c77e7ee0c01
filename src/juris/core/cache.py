"""Short-lived cache of namespaces known to be fully provisioned.

Entries are keyed by schema name and hold the catalog fingerprint they were
written with, so a deployment that adds tables or columns never trusts an entry
written under the old catalog. Without Redis every lookup is a miss.
"""

from redis.exceptions import RedisError

from src.juris.core.config import get_settings
from src.juris.core.logging import get_logger
from src.juris.core.redis import get_redis

logger = get_logger(__name__)

PREFIX_PROVISIONED = "provisioned_namespace"


def _key(schema_name: str) -> str:
    return f"{PREFIX_PROVISIONED}:{schema_name}"


async def is_namespace_provisioned(schema_name: str, fingerprint: str) -> bool:
    """Check whether the namespace was recently verified under this catalog.

    Returns:
        True only on a fresh entry with a matching fingerprint. Redis being
        unavailable counts as a miss.
    """
    if get_settings().provisioned_cache_ttl_seconds <= 0:
        return False
    redis = await get_redis()
    if not redis:
        return False
    try:
        cached = await redis.get(_key(schema_name))
    except RedisError as e:
        logger.warning("Provisioned cache read failed", schema_name=schema_name, error=str(e))
        return False
    return cached == fingerprint


async def mark_namespace_provisioned(schema_name: str, fingerprint: str) -> bool:
    """Record a verified namespace.

    Returns:
        True if stored, False if caching is disabled or Redis unavailable
    """
    ttl = get_settings().provisioned_cache_ttl_seconds
    if ttl <= 0:
        return False
    redis = await get_redis()
    if not redis:
        return False
    try:
        await redis.setex(_key(schema_name), ttl, fingerprint)
    except RedisError as e:
        logger.warning("Provisioned cache write failed", schema_name=schema_name, error=str(e))
        return False
    return True


async def invalidate_namespace(schema_name: str) -> bool:
    """Drop the cached state of a namespace (tenant deactivated or deleted)."""
    redis = await get_redis()
    if not redis:
        return False
    try:
        await redis.delete(_key(schema_name))
    except RedisError as e:
        logger.warning(
            "Provisioned cache invalidation failed", schema_name=schema_name, error=str(e)
        )
        return False
    return True
