# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .aggregation_service import AggregationService
from .dream_service import DreamService
from .impact_service import ImpactService
from .signup_service import SignupService
from .station_service import StationService
from .throttle import enforce_quota

__all__ = [
    "AggregationService",
    "DreamService",
    "ImpactService",
    "SignupService",
    "StationService",
    "enforce_quota",
]
