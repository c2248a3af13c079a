"""
GET /api/system/status endpoint: one status entry per metered source.

A source is Online when its latest reading shows real power flowing,
Offline when it reads zero, and No Data when it has never reported.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import Reader, Settings, TimeRange, run_query
from solar_dashboard.models import SystemComponent
from solar_dashboard.services import dashboard

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/status", response_model=list[SystemComponent])
async def get_system_status(reader: Reader, settings: Settings, time_range: TimeRange):
    return await run_query(
        dashboard.build_system_status(reader),
        "system status",
        settings.request_timeout_s,
    )
