# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client factory and paging helpers
# - redis_client.py: Redis client factory for the rate-limit store
# - rate_limiter.py: Fixed-window rate limiter on Redis counters
# - cors.py: Origin allow-list resolution and CORS headers
# - countdown.py: Event countdown arithmetic
#
# These modules are self-contained and can be tested in isolation.
# They must not import from app/ or core/.
# =============================================================================

from lib.cors import cors_headers, get_allowed_origin, parse_allow_list
from lib.countdown import days_remaining, format_event_banner, has_started

__all__ = [
    # CORS
    "cors_headers",
    "get_allowed_origin",
    "parse_allow_list",
    # Countdown
    "days_remaining",
    "format_event_banner",
    "has_started",
]
