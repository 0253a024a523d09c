"""
Async Redis client with connection pooling for the persistence layer.

One process-wide pool is created lazily from settings and shared by every
client handed out.
"""

from typing import Optional

import structlog
from redis.asyncio import ConnectionPool, Redis

from profile_inference.config import Settings

logger = structlog.get_logger(__name__)


class RedisClient:
    """
    Redis client factory backed by a shared async connection pool.
    """

    _pool: Optional[ConnectionPool] = None

    @classmethod
    def get_client(cls, settings: Settings) -> Redis:
        """
        Get an async Redis client using the shared pool.

        Args:
            settings: Application settings (REDIS_URL, REDIS_MAX_CONNECTIONS)

        Returns:
            Redis client instance
        """
        if cls._pool is None:
            cls._pool = ConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                decode_responses=True,  # Auto-decode bytes to str
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True,
            )
            logger.info("Initialized Redis connection pool", max_connections=settings.REDIS_MAX_CONNECTIONS)

        return Redis(connection_pool=cls._pool)

    @classmethod
    async def close_pool(cls) -> None:
        """Close the connection pool (cleanup on shutdown)."""
        if cls._pool is not None:
            await cls._pool.disconnect()
            cls._pool = None
            logger.info("Closed Redis connection pool")

    @classmethod
    async def ping(cls, settings: Settings) -> bool:
        """True if Redis answers PING."""
        try:
            return bool(await cls.get_client(settings).ping())
        except Exception as e:
            logger.warning("Redis ping failed", error=str(e))
            return False
