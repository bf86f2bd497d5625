"""
Stall Orders — Redis connection

Redis holds only idempotency records for POST /orders. The client is
created on first use, so the service boots while Redis is still coming up;
the first command surfaces any connection error to the caller.
"""
import logging

import redis.asyncio as aioredis

from stall_orders.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


def get_redis() -> aioredis.Redis:
    global _client
    if _client is None:
        _client = aioredis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.HEALTH_CHECK_TIMEOUT,
            socket_timeout=settings.HEALTH_CHECK_TIMEOUT,
            health_check_interval=30,
        )
        logger.info(
            "Redis client configured for %s:%s db %s",
            settings.REDIS_HOST, settings.REDIS_PORT, settings.REDIS_DB,
        )
    return _client


async def close_redis() -> None:
    """Release the pool on shutdown; a later get_redis() builds a fresh client."""
    global _client
    if _client is None:
        return
    client, _client = _client, None
    await client.aclose()
    logger.info("Redis client closed")
