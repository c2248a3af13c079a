"""
Generator endpoints: live performance, hourly output and temperature.

Temperature is not metered; the endpoint serves a fixed reading.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import Reader, Settings, TimeRange, run_query
from solar_dashboard.models import GeneratorOutputPoint, GeneratorPerformance
from solar_dashboard.services import dashboard
from solar_dashboard.services.static_data import GENERATOR_TEMPERATURE

router = APIRouter(prefix="/api/generator", tags=["generator"])


@router.get("/performance", response_model=GeneratorPerformance)
async def get_generator_performance(
    reader: Reader, settings: Settings, time_range: TimeRange
):
    """Return output and efficiency of each generator from its latest reading."""
    return await run_query(
        dashboard.build_generator_performance(reader, settings),
        "generator performance data",
        settings.request_timeout_s,
    )


@router.get("/performance/hourly", response_model=list[GeneratorOutputPoint])
async def get_generator_hourly(
    reader: Reader, settings: Settings, time_range: TimeRange
):
    return await run_query(
        dashboard.build_generator_hourly(reader, time_range),
        "hourly generator data",
        settings.request_timeout_s,
    )


@router.get("/temperature")
async def get_generator_temperature(time_range: TimeRange) -> dict[str, int]:
    return dict(GENERATOR_TEMPERATURE)
