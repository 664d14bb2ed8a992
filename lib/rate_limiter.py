# =============================================================================
# lib/rate_limiter.py - Fixed-Window Rate Limiting on Redis
# =============================================================================
# Per-client submission limits backed by an external Redis counter store
# (Upstash in production).
#
# For each attempt:
# 1. INCR the counter (with PTTL, in one MULTI/EXEC). INCR is atomic, so
#    concurrent attempts each see a distinct count.
# 2. A count of 1 opens the window -> PEXPIRE the key. A key that somehow
#    lost its TTL gets one again.
# 3. A count above the limit -> reject and DECR, so rejected attempts leave
#    the counter at the limit.
#
# Any Redis error surfaces as RateLimitStoreError; callers decide to fail
# closed.
#
# Usage:
#   limiter = RateLimiter(redis_client)
#   result = limiter.hit(DREAMS_RULE, identity="203.0.113.50")
#   if not result.allowed: ...
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

KEY_PREFIX = "ratelimit"


class RateLimitStoreError(Exception):
    """The counter store could not be read or updated."""


@dataclass(frozen=True)
class RateLimitRule:
    """A named quota: at most `max_requests` per `window_seconds`."""

    scope: str
    max_requests: int
    window_seconds: int

    @property
    def window_ms(self) -> int:
        return self.window_seconds * 1000


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one attempt against a rule."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: int  # unix seconds
    retry_after: int  # seconds, 0 when allowed

    def headers(self) -> dict[str, str]:
        """X-RateLimit-* response headers."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }


def build_key(rule: RateLimitRule, identity: str) -> str:
    """Counter key for one client under one rule, e.g. 'ratelimit:dreams:203.0.113.50'."""
    return f"{KEY_PREFIX}:{rule.scope}:{identity}"


class RateLimiter:
    """Fixed-window limiter over a Redis client."""

    def __init__(self, client: Redis):
        self.client = client

    @staticmethod
    def _seconds(ttl_ms: int) -> int:
        return max(1, -(-ttl_ms // 1000))

    def hit(self, rule: RateLimitRule, identity: str) -> RateLimitResult:
        """
        Count one attempt for `identity` under `rule`.

        INCR is the single decision point, so concurrent attempts from one
        identity are serialized by Redis and at most `max_requests` of them
        are allowed per window. A rejected attempt is undone with DECR.

        Returns:
            RateLimitResult; `allowed` is False when the quota was already used up

        Raises:
            RateLimitStoreError: If Redis fails
        """
        key = build_key(rule, identity)
        now = time.time()

        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.incr(key)
            pipe.pttl(key)
            count, ttl = pipe.execute()
            count = int(count)
            ttl = int(ttl) if ttl is not None else -1

            # -1: key without expiry (new window or lost TTL)
            if count == 1 or ttl == -1:
                self.client.pexpire(key, rule.window_ms)
                ttl = rule.window_ms

            ttl_ms = ttl if ttl > 0 else rule.window_ms

            if count > rule.max_requests:
                self.client.decr(key)
                retry_after = self._seconds(ttl_ms)
                logger.info(f"Rate limit hit for scope={rule.scope}")
                return RateLimitResult(
                    allowed=False,
                    limit=rule.max_requests,
                    remaining=0,
                    reset_at=int(now) + retry_after,
                    retry_after=retry_after,
                )

        except RedisError as e:
            raise RateLimitStoreError(f"Rate-limit store error for scope {rule.scope}: {e}") from e

        return RateLimitResult(
            allowed=True,
            limit=rule.max_requests,
            remaining=max(0, rule.max_requests - count),
            reset_at=int(now) + self._seconds(ttl_ms),
            retry_after=0,
        )
