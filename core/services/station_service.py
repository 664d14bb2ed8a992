# =============================================================================
# core/services/station_service.py - Station Directory Lookup
# =============================================================================
# Substring search over the `stations` reference table.
# =============================================================================

import logging
import re

from supabase import Client

from app.exceptions import DatabaseError
from core.models.station import Station, StationSearchResponse

logger = logging.getLogger(__name__)

# Characters with meaning in PostgREST filter strings or LIKE patterns (`_`
# is the single-character wildcard)
_FILTER_UNSAFE = re.compile(r"[,()%*_\"'<>\\]")


class StationService:
    """
    Service for station search.

    Queries shorter than MIN_QUERY_LENGTH never reach the database.
    Results are ordered by name, then id, so equal names come back in a
    stable order.
    """

    MIN_QUERY_LENGTH = 2
    MAX_RESULTS = 10

    def __init__(self, client: Client):
        self.client = client

    @staticmethod
    def normalize_query(raw_query: str | None) -> str:
        """Trim and lower-case the user's input."""
        return (raw_query or "").strip().lower()

    def search(self, raw_query: str | None) -> StationSearchResponse:
        """
        Find up to MAX_RESULTS stations whose name, city or country contains the query.

        Args:
            raw_query: Free text from the `q` parameter

        Returns:
            StationSearchResponse echoing the normalized query

        Raises:
            DatabaseError: If the stations query fails
        """
        query = self.normalize_query(raw_query)
        term = _FILTER_UNSAFE.sub("", query)

        if len(query) < self.MIN_QUERY_LENGTH or len(term) < self.MIN_QUERY_LENGTH:
            return StationSearchResponse(stations=[], query=query, total=0)

        pattern = f"%{term}%"

        try:
            response = (
                self.client.table("stations")
                .select("id, name, city, country, latitude, longitude")
                .or_(f"name.ilike.{pattern},city.ilike.{pattern},country.ilike.{pattern}")
                .order("name")
                .order("id")
                .limit(self.MAX_RESULTS)
                .execute()
            )
        except Exception as e:
            logger.error(f"Station search failed for query {query!r}: {e}")
            raise DatabaseError("Failed to search stations", operation="stations.search") from e

        stations = [Station.from_db_row(row) for row in response.data or []]
        logger.debug(f"Station search {query!r} returned {len(stations)} result(s)")

        return StationSearchResponse(stations=stations, query=query, total=len(stations))
