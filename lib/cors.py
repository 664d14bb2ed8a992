# =============================================================================
# lib/cors.py - Origin Policy Helpers
# =============================================================================
# Resolves which origin to announce in Access-Control-Allow-Origin and builds
# the full set of CORS response headers for an endpoint.
#
# Resolution order:
# 1. Origin is in the allow-list verbatim -> echo it
# 2. Origin matches the optional regex pattern -> echo it
# 3. Otherwise -> first allow-list entry, or "*" if the list is empty
#
# Usage:
#   from lib.cors import cors_headers
#   headers = cors_headers(request.headers.get("origin"), settings.cors_origins_list, ["GET"])
# =============================================================================

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

ALLOWED_HEADERS = "Content-Type, Authorization"


def parse_allow_list(raw: str | None) -> list[str]:
    """
    Split a comma-separated allow-list, trimming entries and dropping empties.

    Example:
        parse_allow_list("http://a.test, ,http://b.test") -> ["http://a.test", "http://b.test"]
    """
    if not raw:
        return []
    return [entry.strip() for entry in raw.split(",") if entry.strip()]


def _matches_pattern(origin: str, pattern: str | None) -> bool:
    if not origin or not pattern:
        return False
    try:
        return re.fullmatch(pattern, origin) is not None
    except re.error as e:
        logger.warning(f"Ignoring invalid CORS origin pattern {pattern!r}: {e}")
        return False


def get_allowed_origin(
    origin: str | None,
    allow_list: Sequence[str],
    pattern: str | None = None,
) -> str:
    """
    Pick the value for Access-Control-Allow-Origin.

    Args:
        origin: The request's Origin header (may be missing)
        allow_list: Configured origins, already parsed
        pattern: Optional regex; a full match also allows the origin

    Returns:
        The request origin when allowed, else the first configured origin,
        else "*" when nothing is configured.
    """
    origin = origin or ""

    if origin and origin in allow_list:
        return origin

    if _matches_pattern(origin, pattern):
        return origin

    return allow_list[0] if allow_list else "*"


def cors_headers(
    origin: str | None,
    allow_list: Sequence[str],
    methods: Iterable[str] = ("GET",),
    pattern: str | None = None,
) -> dict[str, str]:
    """
    Build the CORS response headers for one endpoint.

    `Vary: Origin` is always present because the announced origin depends on
    the request.
    """
    return {
        "Access-Control-Allow-Origin": get_allowed_origin(origin, allow_list, pattern),
        "Vary": "Origin",
        "Access-Control-Allow-Methods": ", ".join(methods),
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }
