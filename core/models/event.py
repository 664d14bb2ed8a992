# =============================================================================
# core/models/event.py - Event Metadata Schemas
# =============================================================================

from datetime import datetime

from .base import ApiModel


class EventInfo(ApiModel):
    """Response of GET /api/event."""

    name: str
    target_date: datetime
    display: str
    days_remaining: int
    has_started: bool
    signup_anchor: str
    mapbox_token: str | None = None
