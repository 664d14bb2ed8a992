# =============================================================================
# app/routers/event.py - Event Countdown Endpoint
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.dependencies import SettingsDep, cors
from core.models.event import EventInfo
from lib.countdown import days_remaining, format_event_banner, has_started

router = APIRouter()


@router.get(
    "",
    response_model=EventInfo,
    dependencies=[Depends(cors("GET"))],
)
async def get_event(settings: SettingsDep):
    """
    Event name, countdown and the announced date/time text.

    `display` is the configured announcement text, independent of
    `targetDate`.
    """
    now = datetime.now(timezone.utc)
    target = settings.EVENT_DATE_UTC

    return EventInfo(
        name=settings.EVENT_NAME,
        target_date=target,
        display=format_event_banner(settings.EVENT_DATE_DISPLAY, settings.EVENT_TIME_DISPLAY),
        days_remaining=days_remaining(now, target),
        has_started=has_started(now, target),
        signup_anchor=settings.EVENT_SIGNUP_ANCHOR,
        mapbox_token=settings.MAPBOX_ACCESS_TOKEN,
    )
