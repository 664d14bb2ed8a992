# =============================================================================
# core/models/station.py - Station Schemas
# =============================================================================
# Stations are read-only reference data. Search results expose coordinates
# as [longitude, latitude] (GeoJSON order) and callers must keep that order.
# =============================================================================

from typing import Any

from pydantic import Field

from .base import ApiModel


class Station(ApiModel):
    """
    A railway station as returned by the search endpoint.

    Example:
        {
            "id": "8011160",
            "name": "Berlin Hauptbahnhof",
            "city": "Berlin",
            "country": "Germany",
            "coordinates": [13.3695, 52.5251]
        }
    """

    id: str = Field(..., description="Station identifier")
    name: str = Field(..., description="Station name")
    city: str | None = Field(default=None, description="City the station serves")
    country: str | None = Field(default=None, description="Country name")
    coordinates: tuple[float, float] | None = Field(
        default=None,
        description="[longitude, latitude]"
    )

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Station":
        """Reshape a `stations` row; latitude/longitude become [lon, lat]."""
        latitude = row.get("latitude")
        longitude = row.get("longitude")
        coordinates = None
        if latitude is not None and longitude is not None:
            coordinates = (float(longitude), float(latitude))

        return cls(
            id=str(row["id"]),
            name=row["name"],
            city=row.get("city"),
            country=row.get("country"),
            coordinates=coordinates,
        )


class StationSearchResponse(ApiModel):
    """Response of GET /api/stations/search."""

    stations: list[Station] = Field(default_factory=list)
    query: str = Field(..., description="The normalized query that was searched")
    total: int = Field(default=0, ge=0)
