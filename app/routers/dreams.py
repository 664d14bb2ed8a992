# =============================================================================
# app/routers/dreams.py - Dream Endpoints
# =============================================================================
# - POST /dreams: submit a dream route (rate limited per client IP)
# - GET /dreams: public listing, newest first
# - GET /dreams/aggregated-by-station: per-destination counts for the map
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from app.dependencies import (
    ClientIpDep,
    SettingsDep,
    cors,
    get_aggregation_service,
    get_dream_service,
)
from core.models.aggregation import AggregationResponse
from core.models.dream import DreamCreate, DreamList, DreamSubmissionResponse
from core.services.aggregation_service import AggregationService
from core.services.dream_service import DreamService

router = APIRouter()


@router.post(
    "",
    response_model=DreamSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(cors("POST"))],
)
async def submit_dream(
    dream: DreamCreate,
    response: Response,
    client_ip: ClientIpDep,
    service: Annotated[DreamService, Depends(get_dream_service)],
):
    """
    Submit a dream route.

    `originStation` and `destinationCity` are required and must differ.
    The id and creation time are assigned by the server.

    Returns 429 when the client exceeded its submission quota.
    """
    result, quota = service.submit(dream, identity=client_ip)

    if quota is not None:
        response.headers.update(quota.headers())

    return result


@router.get(
    "",
    response_model=DreamList,
    dependencies=[Depends(cors("GET"))],
)
async def list_dreams(
    service: Annotated[DreamService, Depends(get_dream_service)],
    limit: Annotated[int, Query(description="Page size (clamped to 1..100)")] = 50,
    offset: Annotated[int, Query(description="Rows to skip")] = 0,
):
    """
    List dreams, newest first.

    Email addresses are never included.
    """
    return service.list_dreams(limit=limit, offset=offset)


@router.get(
    "/aggregated-by-station",
    response_model=AggregationResponse,
    dependencies=[Depends(cors("GET"))],
)
async def aggregated_by_station(
    service: Annotated[AggregationService, Depends(get_aggregation_service)],
    settings: SettingsDep,
    min_dreams: Annotated[
        int | None,
        Query(alias="minDreams", ge=1, description="Minimum dreams for a destination to be included"),
    ] = None,
):
    """
    Dreams grouped by destination.

    Only destinations with at least `minDreams` dreams are returned,
    ordered by count. Destinations without a matching place have null
    coordinates.
    """
    threshold = min_dreams if min_dreams is not None else settings.AGGREGATION_MIN_DREAMS
    return service.aggregate_by_station(threshold)
