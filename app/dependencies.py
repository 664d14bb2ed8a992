# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for store handles and services.
# These are injected into route handlers using Depends().
#
# Clients are built once per process (lru_cache) but services receive them
# explicitly, so tests swap them via app.dependency_overrides.
# =============================================================================

import logging
from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request, Response
from redis import Redis
from supabase import Client

from app.config import Settings, get_settings
from core.services import (
    AggregationService,
    DreamService,
    ImpactService,
    SignupService,
    StationService,
)
from lib.cors import cors_headers
from lib.rate_limiter import RateLimiter, RateLimitRule
from lib.redis_client import create_redis_client
from lib.supabase_client import create_supabase_client

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_settings)]


# =============================================================================
# Store Handles
# =============================================================================

@lru_cache
def _supabase_client(url: str, key: str) -> Client:
    return create_supabase_client(url, key)


@lru_cache
def _redis_client(url: str) -> Redis:
    return create_redis_client(url)


def get_supabase(settings: SettingsDep) -> Client:
    """Supabase client using the service_role key."""
    return _supabase_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)


def get_rate_limiter(settings: SettingsDep) -> RateLimiter | None:
    """Rate limiter, or None when no counter store is configured."""
    if not settings.REDIS_URL:
        return None
    return RateLimiter(_redis_client(settings.REDIS_URL))


SupabaseDep = Annotated[Client, Depends(get_supabase)]
RateLimiterDep = Annotated[RateLimiter | None, Depends(get_rate_limiter)]


# =============================================================================
# Services
# =============================================================================

def get_station_service(client: SupabaseDep) -> StationService:
    return StationService(client)


def get_dream_service(
    client: SupabaseDep,
    limiter: RateLimiterDep,
    settings: SettingsDep,
) -> DreamService:
    rule = RateLimitRule(
        scope="dreams",
        max_requests=settings.DREAMS_RATE_LIMIT_MAX,
        window_seconds=settings.DREAMS_RATE_LIMIT_WINDOW_SECONDS,
    )
    return DreamService(client, limiter, rule)


def get_aggregation_service(client: SupabaseDep) -> AggregationService:
    return AggregationService(client)


def get_impact_service(client: SupabaseDep) -> ImpactService:
    return ImpactService(client)


def get_signup_service(
    client: SupabaseDep,
    limiter: RateLimiterDep,
    settings: SettingsDep,
) -> SignupService:
    rule = RateLimitRule(
        scope="signups",
        max_requests=settings.SIGNUP_RATE_LIMIT_MAX,
        window_seconds=settings.SIGNUP_RATE_LIMIT_WINDOW_SECONDS,
    )
    return SignupService(client, limiter, rule, settings.EVENT_DATE_DISPLAY)


# =============================================================================
# Request Helpers
# =============================================================================

def extract_client_ip(request: Request) -> str:
    """
    Client IP for rate limiting.

    Order: first X-Forwarded-For entry, X-Real-IP, socket peer, "unknown".
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    real_ip = (request.headers.get("X-Real-IP") or "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host

    logger.warning("Could not determine client IP, using 'unknown'")
    return "unknown"


ClientIpDep = Annotated[str, Depends(extract_client_ip)]


def request_cors_headers(
    request: Request,
    settings: Settings,
    methods: tuple[str, ...],
) -> dict[str, str]:
    """CORS headers for this request's Origin under the configured policy."""
    return cors_headers(
        request.headers.get("origin"),
        settings.cors_origins_list,
        methods,
        pattern=settings.CORS_ALLOW_ORIGIN_PATTERN,
    )


def cors(*methods: str) -> Callable[..., None]:
    """
    Dependency factory that stamps CORS headers on the route's response.

    Usage:
        @router.get("/search", dependencies=[Depends(cors("GET"))])
    """
    declared = methods or ("GET",)

    def apply_cors(request: Request, response: Response, settings: SettingsDep) -> None:
        response.headers.update(request_cors_headers(request, settings, declared))

    return apply_cors
