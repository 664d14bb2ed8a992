# =============================================================================
# core/services/aggregation_service.py - Dreams Aggregated by Station
# =============================================================================
# Groups dreams by destination for the map view:
#
#   (a) count dreams per destination label
#   (b) keep groups with count >= threshold
#   (c) order by count desc, then label asc
#   (d) join coordinates from `places` by exact name (misses -> null)
#   (e) summarise
#
# Only step (a) is fatal. A failing places lookup leaves coordinates null.
# =============================================================================

import logging
import math
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from app.exceptions import DatabaseError
from core.models.aggregation import (
    AggregatedStation,
    AggregationData,
    AggregationMetadata,
    AggregationResponse,
    AggregationSummary,
)
from lib.supabase_client import fetch_all_rows

logger = logging.getLogger(__name__)


def ready_percentage(ready_stations: int, total_stations: int) -> int:
    """Rounded share of ready stations; 0 when there are no stations."""
    if total_stations <= 0:
        return 0
    # Half-up rounding: 12.5 -> 13
    return math.floor(ready_stations * 100 / total_stations + 0.5)


def group_destinations(rows: list[dict[str, Any]], min_dreams: int) -> list[tuple[str, int]]:
    """
    Count rows per destination and keep groups meeting the threshold.

    Blank labels are ignored. Result is ordered by count desc, label asc.

    Example:
        rows for {A: 4, B: 2, C: 3}, min_dreams=3 -> [("A", 4), ("C", 3)]
    """
    counts = Counter(
        label.strip()
        for label in (row.get("destination_city") for row in rows)
        if isinstance(label, str) and label.strip()
    )

    groups = [(label, count) for label, count in counts.items() if count >= min_dreams]
    groups.sort(key=lambda item: (-item[1], item[0]))
    return groups


class AggregationService:
    """Service for the per-destination map aggregation."""

    def __init__(self, client: Client):
        self.client = client

    def _fetch_destinations(self) -> list[dict[str, Any]]:
        try:
            return fetch_all_rows(
                lambda: self.client.table("dreams").select("destination_city").order("id")
            )
        except Exception as e:
            logger.error(f"Failed to fetch dreams for aggregation: {e}")
            raise DatabaseError("Failed to fetch station data", operation="dreams.aggregate") from e

    def _fetch_places(self, names: list[str]) -> dict[str, dict[str, Any]]:
        """Places keyed by exact name. Errors are logged and yield {}."""
        if not names:
            return {}

        try:
            response = (
                self.client.table("places")
                .select("name, latitude, longitude, country_code")
                .in_("name", names)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Places lookup failed, returning stations without coordinates: {e}")
            return {}

        places: dict[str, dict[str, Any]] = {}
        for place in response.data or []:
            places.setdefault(place["name"], place)
        return places

    def aggregate_by_station(
        self,
        min_dreams: int,
        now: datetime | None = None,
    ) -> AggregationResponse:
        """
        Build the aggregated station view.

        Args:
            min_dreams: Threshold a destination needs to be included
            now: Generation timestamp (defaults to current UTC time)

        Raises:
            DatabaseError: If the dreams query fails
        """
        groups = group_destinations(self._fetch_destinations(), min_dreams)
        places = self._fetch_places([label for label, _ in groups])

        stations = []
        for label, count in groups:
            place = places.get(label, {})
            stations.append(
                AggregatedStation(
                    station=label,
                    dream_count=count,
                    latitude=place.get("latitude"),
                    longitude=place.get("longitude"),
                    country_code=place.get("country_code"),
                    ready_for_event=count >= min_dreams,
                )
            )

        total_stations = len(stations)
        ready_stations = sum(1 for s in stations if s.ready_for_event)

        summary = AggregationSummary(
            total_stations=total_stations,
            ready_stations=ready_stations,
            total_dreams=sum(s.dream_count for s in stations),
            ready_percentage=ready_percentage(ready_stations, total_stations),
        )

        logger.debug(f"Aggregated {total_stations} station(s) at threshold {min_dreams}")

        return AggregationResponse(
            data=AggregationData(
                stations=stations,
                summary=summary,
                metadata=AggregationMetadata(
                    min_dreams_threshold=min_dreams,
                    generated_at=now or datetime.now(timezone.utc),
                ),
            )
        )
