# =============================================================================
# lib/redis_client.py - Redis Client Factory
# =============================================================================
# Connects to the hosted counter store used for rate limiting.
# Upstash exposes a Redis-protocol endpoint (rediss://default:<token>@host:port),
# so the plain redis client is used.
# =============================================================================

import logging

import redis

logger = logging.getLogger(__name__)


def create_redis_client(url: str) -> redis.Redis:
    """
    Get a Redis client for rate-limit counters.

    Connection is lazy: the first command opens it. Responses are decoded
    to str.
    """
    client = redis.from_url(url, decode_responses=True, socket_timeout=5)
    logger.info(f"Redis client configured for {url.split('@')[-1]}")
    return client
