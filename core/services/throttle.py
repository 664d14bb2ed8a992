# =============================================================================
# core/services/throttle.py - Submission Quotas
# =============================================================================
# Turns a RateLimiter outcome into API errors:
# - quota used up       -> RateLimitExceededError (429)
# - counter store down  -> RateLimitUnavailableError (503, fail closed)
# - no limiter at all   -> rate limiting disabled, always allowed
# =============================================================================

import logging

from app.exceptions import RateLimitExceededError, RateLimitUnavailableError
from lib.rate_limiter import (
    RateLimiter,
    RateLimitResult,
    RateLimitRule,
    RateLimitStoreError,
)

logger = logging.getLogger(__name__)


def enforce_quota(
    limiter: RateLimiter | None,
    rule: RateLimitRule,
    identity: str,
) -> RateLimitResult | None:
    """
    Count one submission attempt and reject it when over quota.

    Returns:
        The limiter result (for X-RateLimit-* headers), or None when rate
        limiting is disabled

    Raises:
        RateLimitExceededError: Quota for the current window is used up
        RateLimitUnavailableError: The counter store failed
    """
    if limiter is None:
        return None

    try:
        result = limiter.hit(rule, identity)
    except RateLimitStoreError as e:
        logger.error(f"Rejecting {rule.scope} submission, counter store unavailable: {e}")
        raise RateLimitUnavailableError(rule.scope) from e

    if not result.allowed:
        raise RateLimitExceededError(result.retry_after, headers=result.headers())

    return result
