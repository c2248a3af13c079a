"""
Weather endpoints.

Current conditions and the short forecast are static. The solar radiation
chart is estimated from the output of inverter 1 over the last three hours.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import Clock, Reader, Settings, TimeRange, run_query
from solar_dashboard.models import SolarRadiationPoint
from solar_dashboard.services import dashboard
from solar_dashboard.services.static_data import WEATHER, WEATHER_FORECAST

router = APIRouter(prefix="/api/weather", tags=["weather"])


@router.get("")
async def get_weather(time_range: TimeRange) -> dict:
    return dict(WEATHER)


@router.get("/forecast")
async def get_weather_forecast(time_range: TimeRange) -> list[dict]:
    return [dict(entry) for entry in WEATHER_FORECAST]


@router.get("/solar", response_model=list[SolarRadiationPoint])
async def get_solar_radiation(
    reader: Reader, settings: Settings, clock: Clock, time_range: TimeRange
):
    """Return radiation estimates (W/m^2) and potential output (kW)."""
    return await run_query(
        dashboard.build_solar_radiation(reader, now=clock()),
        "solar radiation data",
        settings.request_timeout_s,
    )
