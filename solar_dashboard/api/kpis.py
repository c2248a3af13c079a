"""
GET /api/kpis endpoint for the dashboard KPI tiles.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import Reader, Settings, TimeRange, run_query
from solar_dashboard.models import Kpi
from solar_dashboard.services import dashboard

router = APIRouter(prefix="/api", tags=["kpis"])


@router.get("/kpis", response_model=list[Kpi])
async def get_kpis(reader: Reader, settings: Settings, time_range: TimeRange):
    """Return the KPI tiles with their change against the previous period."""
    return await run_query(
        dashboard.build_kpis(reader, time_range, settings),
        "KPI data",
        settings.request_timeout_s,
    )
