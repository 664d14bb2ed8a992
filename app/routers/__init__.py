# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - stations.py: Station search
# - dreams.py: Dream submission, listing and per-station aggregation
# - impact.py: Dashboard counters
# - event.py: Event countdown metadata
# - signup.py: Event signup
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import dreams
from . import event
from . import health
from . import impact
from . import signup
from . import stations

__all__ = [
    "dreams",
    "event",
    "health",
    "impact",
    "signup",
    "stations",
]
