"""
Redis client for latest-reading cache operations.

The newest reading of each source is cached under ``latest:{source}`` with a
short TTL so that KPI tiles, system status and the grid widget do not hit the
database for the same row several times per page load. All operations are
best-effort: connection failures are logged and reported as a cache miss.

CHANGELOG:
- 2026-10-19: Cache latest readings per source; read REDIS_URL from settings
"""

import logging

import redis.asyncio as redis

from solar_dashboard.core.sources import PowerSource
from solar_dashboard.models import PowerReading

logger = logging.getLogger(__name__)


def cache_key(source: PowerSource) -> str:
    """Return the Redis key holding the latest reading of *source*."""
    return f"latest:{source.value}"


async def get_redis(url: str) -> redis.Redis:
    """Create and return an async Redis client for *url*.

    Returns:
        redis.Redis: Async Redis client.
    """
    return redis.from_url(url)


async def get_cached_reading(url: str, source: PowerSource) -> PowerReading | None:
    """Return the cached latest reading of *source*, or None on miss or failure.

    Args:
        url: Redis connection URL.
        source: Power source to look up.
    """
    key = cache_key(source)
    try:
        client = await get_redis(url)
        try:
            cached = await client.get(key)
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Redis read failed for key %s", key, exc_info=True)
        return None

    if cached is None:
        return None
    return PowerReading.model_validate_json(cached)


async def set_cached_reading(url: str, reading: PowerReading, ttl_s: int) -> None:
    """Store *reading* as the latest reading of its source for *ttl_s* seconds.

    Best-effort operation: if Redis is unavailable the error is logged and
    not raised.
    """
    key = cache_key(reading.source)
    try:
        client = await get_redis(url)
        try:
            await client.set(key, reading.model_dump_json(), ex=ttl_s)
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Redis write failed for key %s", key, exc_info=True)
