# =============================================================================
# core/services/dream_service.py - Dream Ingestion and Listing
# =============================================================================
# Handles dream submissions and the public dream listing.
# Separates HTTP concerns from database/business logic.
#
# Submission flow:
# 1. Payload already validated by DreamCreate (FastAPI rejects bad input
#    before this service is called, so storage is never touched)
# 2. Per-client quota check against the counter store
# 3. Best-effort coordinate lookup for origin and destination
# 4. Insert with server-generated id and created_at
# =============================================================================

import logging
import re
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from supabase import Client

from app.exceptions import DatabaseError
from core.models.dream import (
    DreamCreate,
    DreamList,
    DreamSubmissionResponse,
    PublicDream,
)
from core.services.throttle import enforce_quota
from lib.rate_limiter import RateLimiter, RateLimitResult, RateLimitRule

logger = logging.getLogger(__name__)

# Columns safe to show publicly (no email)
PUBLIC_COLUMNS = (
    "id, dreamer_name, origin_station, destination_city, origin_country, "
    "destination_country, why, origin_latitude, origin_longitude, created_at"
)

_LIKE_UNSAFE = re.compile(r"[%*_\\]")


class DreamService:
    """
    Service for dream submissions.

    Store handles are passed in by the caller; see app/dependencies.py.
    """

    MAX_PAGE_SIZE = 100
    DEFAULT_PAGE_SIZE = 50

    def __init__(
        self,
        client: Client,
        limiter: RateLimiter | None,
        rule: RateLimitRule,
    ):
        self.client = client
        self.limiter = limiter
        self.rule = rule

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(
        self,
        dream: DreamCreate,
        identity: str,
    ) -> tuple[DreamSubmissionResponse, RateLimitResult | None]:
        """
        Persist one dream.

        Args:
            dream: Validated submission
            identity: Rate-limit identity (client IP)

        Returns:
            Tuple of (confirmation, rate-limit result or None when disabled)

        Raises:
            RateLimitExceededError: Client used up its quota
            RateLimitUnavailableError: Counter store failed
            DatabaseError: Insert failed
        """
        quota = enforce_quota(self.limiter, self.rule, identity)

        origin_lat, origin_lon = self._lookup_coordinates(dream.origin_station)
        dest_lat, dest_lon = self._lookup_coordinates(dream.destination_city)

        dream_id = str(uuid4())
        data = {
            "id": dream_id,
            "dreamer_name": dream.dreamer_name,
            "origin_station": dream.origin_station,
            "destination_city": dream.destination_city,
            "origin_country": dream.origin_country,
            "destination_country": dream.destination_country,
            "email": dream.email,
            "why": dream.why,
            "origin_latitude": origin_lat,
            "origin_longitude": origin_lon,
            "destination_latitude": dest_lat,
            "destination_longitude": dest_lon,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            response = self.client.table("dreams").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to insert dream: {e}")
            raise DatabaseError("Failed to save dream route", operation="dreams.insert") from e

        if response.data:
            dream_id = str(response.data[0].get("id", dream_id))

        logger.info(f"Dream submitted: {dream_id}")
        return DreamSubmissionResponse(id=dream_id), quota

    def _lookup_coordinates(self, label: str) -> tuple[float | None, float | None]:
        """
        Best-effort (latitude, longitude) for a station label.

        Uses the part before the first comma ("Berlin Hbf, Berlin, Germany"
        -> "Berlin Hbf"). Any failure or miss yields (None, None).
        """
        term = _LIKE_UNSAFE.sub("", label.split(",")[0]).strip()
        if not term:
            return None, None

        try:
            response = (
                self.client.table("stations")
                .select("latitude, longitude")
                .ilike("name", f"%{term}%")
                .order("name")
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Coordinate lookup failed for {term!r}: {e}")
            return None, None

        rows = response.data or []
        if not rows:
            return None, None
        return rows[0].get("latitude"), rows[0].get("longitude")

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def list_dreams(
        self,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> DreamList:
        """
        List dreams, newest first.

        Out-of-range paging values are clamped rather than rejected:
        limit to 1..MAX_PAGE_SIZE, offset to >= 0.

        Raises:
            DatabaseError: If the query fails
        """
        limit = min(max(limit, 1), self.MAX_PAGE_SIZE)
        offset = max(offset, 0)

        try:
            response = (
                self.client.table("dreams")
                .select(PUBLIC_COLUMNS, count="exact")
                .order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list dreams: {e}")
            raise DatabaseError("Failed to fetch dreams", operation="dreams.list") from e

        rows: list[dict[str, Any]] = response.data or []
        return DreamList(
            dreams=[PublicDream.from_db_row(row) for row in rows],
            total=response.count or 0,
            limit=limit,
            offset=offset,
        )
