"""
Redis connection management for the result cache.

The service treats Redis as optional infrastructure: failing to reach it
at startup leaves the client unset and checks simply bypass the cache.
"""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..settings import Settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


async def connect_to_redis(settings: Optional[Settings] = None) -> Redis:
    """
    Create the global Redis client and verify it answers.

    :param settings: Application settings (optional)
    :return: Redis client
    :raises RedisError: if the server cannot be reached
    """
    global _client

    if _client is not None:
        return _client

    if settings is None:
        settings = Settings()

    client = Redis.from_url(
        settings.redis_url,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        await client.ping()
    except RedisError:
        await client.aclose()
        raise

    logger.info(f"Successfully connected to Redis at {settings.redis_host}:{settings.redis_port}")
    _client = client
    return _client


async def disconnect_from_redis() -> None:
    """Close the global Redis client."""
    global _client

    if _client is not None:
        try:
            await _client.aclose()
            logger.info("Disconnected from Redis")
        except RedisError as e:
            logger.error(f"Error closing Redis client: {e}")
        finally:
            _client = None


async def health_check() -> bool:
    """
    Check if Redis connection is healthy.

    :return: True if healthy, False otherwise
    """
    if _client is None:
        return False
    try:
        return bool(await _client.ping())
    except RedisError as e:
        logger.error(f"Redis health check failed: {e}")
        return False
