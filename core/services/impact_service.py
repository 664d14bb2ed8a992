# =============================================================================
# core/services/impact_service.py - Dashboard Impact Metrics
# =============================================================================
# Counters for the public dashboard:
# - dreams_count(): totals, today's submissions, momentum
# - popular_routes(): most requested routes, destinations and origin cities
#
# The total count is the primary query and is fatal on failure. Today's
# count is secondary and degrades to 0.
# =============================================================================

import logging
from collections import Counter
from datetime import datetime, time, timedelta, timezone

from supabase import Client

from app.exceptions import DatabaseError
from core.models.impact import (
    DreamsCountResponse,
    ImpactMetrics,
    Momentum,
    PopularDestination,
    PopularOrigin,
    PopularRoute,
    PopularRoutesResponse,
)
from lib.supabase_client import fetch_all_rows

logger = logging.getLogger(__name__)

TOP_ROUTES = 20
TOP_DESTINATIONS = 10
TOP_ORIGINS = 10


def utc_day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Start of the UTC calendar day containing `now`, and start of the next one."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    start = datetime.combine(now.astimezone(timezone.utc).date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def momentum_for(today_dreams: int) -> Momentum:
    return Momentum.GROWING if today_dreams > 0 else Momentum.STEADY


def origin_city(station_label: str) -> str:
    """
    City part of a "Station, City, Country" label.

    Falls back to the whole label when it has no comma.
    """
    parts = [part.strip() for part in station_label.split(",")]
    if len(parts) > 1 and parts[1]:
        return parts[1]
    return station_label.strip()


def _ranked(counter: Counter, limit: int) -> list[tuple[str, int]]:
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))[:limit]


class ImpactService:
    """Service for dashboard counters."""

    def __init__(self, client: Client):
        self.client = client

    def _count_today(self, now: datetime) -> int:
        start, end = utc_day_bounds(now)
        try:
            response = (
                self.client.table("dreams")
                .select("id", count="exact", head=True)
                .gte("created_at", start.isoformat())
                .lt("created_at", end.isoformat())
                .execute()
            )
        except Exception as e:
            logger.warning(f"Today's dreams count failed, defaulting to 0: {e}")
            return 0
        return response.count or 0

    def dreams_count(self, now: datetime | None = None) -> DreamsCountResponse:
        """
        Totals for the dream counter tile.

        Raises:
            DatabaseError: If the total count query fails
        """
        now = now or datetime.now(timezone.utc)

        try:
            response = (
                self.client.table("dreams")
                .select("id", count="exact", head=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching dreams count: {e}")
            raise DatabaseError("Failed to fetch dreams count", operation="dreams.count") from e

        total_dreams = response.count or 0
        today_dreams = self._count_today(now)

        # Event signups are not counted here yet
        participation_signups = 0
        participation_rate = round(participation_signups / total_dreams * 100) if total_dreams else 0

        return DreamsCountResponse(
            total_dreams=total_dreams,
            participation_signups=participation_signups,
            participation_signups_implemented=False,
            today_dreams=today_dreams,
            last_updated=now,
            metrics=ImpactMetrics(
                momentum=momentum_for(today_dreams),
                participation_rate=participation_rate,
            ),
        )

    def popular_routes(self, now: datetime | None = None) -> PopularRoutesResponse:
        """
        Rank routes, destinations and origin cities by number of dreams.

        Raises:
            DatabaseError: If the dreams query fails
        """
        try:
            rows = fetch_all_rows(
                lambda: (
                    self.client.table("dreams")
                    .select("origin_station, destination_city")
                    .not_.is_("origin_station", "null")
                    .not_.is_("destination_city", "null")
                    .order("id")
                )
            )
        except Exception as e:
            logger.error(f"Error fetching routes: {e}")
            raise DatabaseError("Failed to fetch routes", operation="dreams.routes") from e

        routes: Counter = Counter()
        destinations: Counter = Counter()
        origins: Counter = Counter()

        for row in rows:
            origin = (row.get("origin_station") or "").strip()
            destination = (row.get("destination_city") or "").strip()
            if not origin or not destination:
                continue
            routes[(origin, destination)] += 1
            destinations[destination] += 1
            origins[origin_city(origin)] += 1

        total_dreams = sum(routes.values())

        popular_routes = [
            PopularRoute(
                route=f"{origin}->{destination}",
                from_=origin,
                to=destination,
                dream_count=count,
                percentage=round(count / total_dreams * 100) if total_dreams else 0,
            )
            for (origin, destination), count in _ranked(routes, TOP_ROUTES)
        ]

        return PopularRoutesResponse(
            popular_routes=popular_routes,
            popular_destinations=[
                PopularDestination(destination=name, dream_count=count)
                for name, count in _ranked(destinations, TOP_DESTINATIONS)
            ],
            popular_origins=[
                PopularOrigin(city=name, dream_count=count)
                for name, count in _ranked(origins, TOP_ORIGINS)
            ],
            total_routes=len(routes),
            total_dreams=total_dreams,
            last_updated=now or datetime.now(timezone.utc),
        )
