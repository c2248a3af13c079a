"""
GET /api/alerts endpoint: alerts raised inside the selected window.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import Reader, Settings, TimeRange, run_query
from solar_dashboard.models import AlertOut
from solar_dashboard.services import dashboard

router = APIRouter(prefix="/api", tags=["alerts"])


@router.get("/alerts", response_model=list[AlertOut])
async def get_alerts(reader: Reader, settings: Settings, time_range: TimeRange):
    """Return alerts in the window, oldest first."""
    return await run_query(
        dashboard.build_alerts(reader, time_range),
        "alerts",
        settings.request_timeout_s,
    )
