"""
Liveness endpoints for the dashboard API.

``GET /`` and ``GET /health`` answer with the service status and the data
mode the application was started in. Neither touches the telemetry reader,
so they stay green while the database is down; data endpoints report that
outage as 503 instead.

CHANGELOG:
- 2026-10-19: Serve the root route and report the data mode
- 2026-10-19: Initial creation

TODO:
- None
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import Settings

router = APIRouter(tags=["health"])


@router.get("/")
@router.get("/health")
async def health(settings: Settings) -> dict[str, str]:
    return {"status": "ok", "dataMode": settings.data_mode}
