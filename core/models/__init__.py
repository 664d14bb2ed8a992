# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: ApiModel (snake_case in Python, camelCase on the wire)
# - station.py: Station search schemas
# - dream.py: Dream submission and listing schemas
# - aggregation.py: Per-destination aggregation schemas
# - impact.py: Dashboard counters and popular routes
# - event.py: Event countdown metadata
# - signup.py: Event signup schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import ApiModel

# -----------------------------------------------------------------------------
# Station Models - Reference data lookup
# -----------------------------------------------------------------------------
from .station import Station, StationSearchResponse

# -----------------------------------------------------------------------------
# Dream Models - Submissions
# -----------------------------------------------------------------------------
from .dream import (
    DreamCreate,
    DreamList,
    DreamSubmissionResponse,
    PublicDream,
)

# -----------------------------------------------------------------------------
# Aggregation Models - Map view
# -----------------------------------------------------------------------------
from .aggregation import (
    AggregatedStation,
    AggregationData,
    AggregationMetadata,
    AggregationResponse,
    AggregationSummary,
)

# -----------------------------------------------------------------------------
# Impact Models - Dashboard
# -----------------------------------------------------------------------------
from .impact import (
    DreamsCountResponse,
    ImpactMetrics,
    Momentum,
    PopularDestination,
    PopularOrigin,
    PopularRoute,
    PopularRoutesResponse,
)

# -----------------------------------------------------------------------------
# Event Models - Countdown and signup
# -----------------------------------------------------------------------------
from .event import EventInfo
from .signup import ParticipationLevel, SignupCreate, SignupResponse

__all__ = [
    "ApiModel",
    # Station
    "Station",
    "StationSearchResponse",
    # Dream
    "DreamCreate",
    "DreamList",
    "DreamSubmissionResponse",
    "PublicDream",
    # Aggregation
    "AggregatedStation",
    "AggregationData",
    "AggregationMetadata",
    "AggregationResponse",
    "AggregationSummary",
    # Impact
    "DreamsCountResponse",
    "ImpactMetrics",
    "Momentum",
    "PopularDestination",
    "PopularOrigin",
    "PopularRoute",
    "PopularRoutesResponse",
    # Event
    "EventInfo",
    "ParticipationLevel",
    "SignupCreate",
    "SignupResponse",
]
