"""Redis connection management for the session store."""

from functools import lru_cache

from redis.asyncio import ConnectionPool, Redis

from kafkalens.config.settings import settings
from kafkalens.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_redis_pool() -> ConnectionPool:
    """Get or create Redis connection pool."""
    return ConnectionPool.from_url(
        settings.redis_url,
        decode_responses=True,
        max_connections=50,
    )


@lru_cache(maxsize=1)
def get_redis_client() -> Redis:
    """Get Redis client with shared connection pool."""
    return Redis(connection_pool=get_redis_pool())


async def ping_redis() -> bool:
    """Check the connection; used at startup and by the readiness check."""
    try:
        await get_redis_client().ping()
        return True
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        return False


async def close_redis_connection() -> None:
    """Close Redis connection pool."""
    try:
        await get_redis_pool().disconnect()
        get_redis_pool.cache_clear()
        get_redis_client.cache_clear()
        logger.info("Redis connection pool closed")
    except Exception as e:
        logger.error(f"Error closing Redis pool: {e}")
