# =============================================================================
# core/models/impact.py - Dashboard Impact Schemas
# =============================================================================
# Small counters for the public dashboard tiles.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import ApiModel


class Momentum(str, Enum):
    """
    Coarse activity label.

    - growing: at least one dream was submitted today (UTC)
    - steady: none yet today
    """
    GROWING = "growing"
    STEADY = "steady"


class ImpactMetrics(ApiModel):
    momentum: Momentum
    participation_rate: int = Field(..., ge=0)


class DreamsCountResponse(ApiModel):
    """
    Response of GET /api/impact/dreams-count.

    `participation_signups` is a placeholder that is always 0 until event
    signups are counted here; `participation_signups_implemented` says so
    explicitly.
    """

    total_dreams: int = Field(..., ge=0)
    participation_signups: int = Field(default=0, ge=0)
    participation_signups_implemented: bool = False
    today_dreams: int = Field(default=0, ge=0)
    last_updated: datetime
    metrics: ImpactMetrics


class PopularRoute(ApiModel):
    route: str = Field(..., description="'<origin>-><destination>'")
    from_: str = Field(..., alias="from")
    to: str
    dream_count: int
    percentage: int


class PopularDestination(ApiModel):
    destination: str
    dream_count: int


class PopularOrigin(ApiModel):
    city: str
    dream_count: int


class PopularRoutesResponse(ApiModel):
    """Response of GET /api/impact/routes-popular."""

    popular_routes: list[PopularRoute] = Field(default_factory=list)
    popular_destinations: list[PopularDestination] = Field(default_factory=list)
    popular_origins: list[PopularOrigin] = Field(default_factory=list)
    total_routes: int = 0
    total_dreams: int = 0
    last_updated: datetime
