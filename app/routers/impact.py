# =============================================================================
# app/routers/impact.py - Dashboard Impact Endpoints
# =============================================================================
# Public, cacheable counters for the impact dashboard.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.dependencies import cors, get_impact_service
from core.models.impact import DreamsCountResponse, PopularRoutesResponse
from core.services.impact_service import ImpactService

router = APIRouter()

# 5 min fresh, 10 min stale
DREAMS_COUNT_CACHE_CONTROL = "public, max-age=300, stale-while-revalidate=600"
ROUTES_CACHE_CONTROL = "public, max-age=600, stale-while-revalidate=1200"


@router.get(
    "/dreams-count",
    response_model=DreamsCountResponse,
    dependencies=[Depends(cors("GET"))],
)
async def dreams_count(
    response: Response,
    service: Annotated[ImpactService, Depends(get_impact_service)],
):
    """
    Total dreams, today's dreams and a momentum label.

    `participationSignups` is a placeholder (always 0); see
    `participationSignupsImplemented`.
    """
    result = service.dreams_count()
    response.headers["Cache-Control"] = DREAMS_COUNT_CACHE_CONTROL
    return result


@router.get(
    "/routes-popular",
    response_model=PopularRoutesResponse,
    dependencies=[Depends(cors("GET"))],
)
async def routes_popular(
    response: Response,
    service: Annotated[ImpactService, Depends(get_impact_service)],
):
    """Top requested routes, destinations and origin cities."""
    result = service.popular_routes()
    response.headers["Cache-Control"] = ROUTES_CACHE_CONTROL
    return result
