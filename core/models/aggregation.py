# =============================================================================
# core/models/aggregation.py - Station Aggregation Schemas
# =============================================================================
# Derived, never persisted: dreams grouped by destination with coordinates
# joined from the `places` reference table.
# =============================================================================

from datetime import datetime

from pydantic import Field

from .base import ApiModel


class AggregatedStation(ApiModel):
    """One destination group that met the threshold."""

    station: str = Field(..., description="Destination label as submitted")
    dream_count: int = Field(..., ge=0)
    latitude: float | None = None
    longitude: float | None = None
    country_code: str | None = None
    ready_for_event: bool


class AggregationSummary(ApiModel):
    """
    Totals over the surviving groups.

    `ready_stations` is counted over groups already filtered by the threshold,
    so it always equals `total_stations`. Kept as reported.
    """

    total_stations: int = Field(..., ge=0)
    ready_stations: int = Field(..., ge=0)
    total_dreams: int = Field(..., ge=0)
    ready_percentage: int = Field(..., ge=0, le=100)


class AggregationMetadata(ApiModel):
    min_dreams_threshold: int
    generated_at: datetime


class AggregationData(ApiModel):
    stations: list[AggregatedStation] = Field(default_factory=list)
    summary: AggregationSummary
    metadata: AggregationMetadata


class AggregationResponse(ApiModel):
    """Response of GET /api/dreams/aggregated-by-station."""

    success: bool = True
    data: AggregationData
