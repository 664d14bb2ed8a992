# =============================================================================
# app/routers/stations.py - Station Search Endpoint
# =============================================================================
# Autocomplete for the dream form's origin/destination fields.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.dependencies import cors, get_station_service
from core.models.station import StationSearchResponse
from core.services.station_service import StationService

router = APIRouter()


@router.get(
    "/search",
    response_model=StationSearchResponse,
    dependencies=[Depends(cors("GET"))],
)
async def search_stations(
    service: Annotated[StationService, Depends(get_station_service)],
    q: Annotated[str, Query(max_length=200, description="Part of a station name, city or country")] = "",
):
    """
    Search stations by name, city or country.

    Queries shorter than 2 characters return an empty list without hitting
    the database. At most 10 stations are returned, ordered by name.
    Coordinates are `[longitude, latitude]`.
    """
    return service.search(q)
