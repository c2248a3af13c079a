"""
Grid endpoints: connection status and per-phase series of the grid meter.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import Reader, Settings, TimeRange, run_query
from solar_dashboard.models import (
    FrequencyPoint,
    GridStatus,
    PhaseSeriesPoint,
    PowerFactorPoint,
)
from solar_dashboard.services import dashboard

router = APIRouter(prefix="/api/grid", tags=["grid"])


@router.get("/status", response_model=GridStatus)
async def get_grid_status(reader: Reader, settings: Settings, time_range: TimeRange):
    """Return grid import/export totals, net balance and live readings."""
    return await run_query(
        dashboard.build_grid_status(reader, time_range, settings),
        "grid status",
        settings.request_timeout_s,
    )


@router.get("/voltage", response_model=list[PhaseSeriesPoint])
async def get_grid_voltage(reader: Reader, settings: Settings, time_range: TimeRange):
    return await run_query(
        dashboard.build_grid_voltage(reader, time_range),
        "grid voltage data",
        settings.request_timeout_s,
    )


@router.get("/current", response_model=list[PhaseSeriesPoint])
async def get_grid_current(reader: Reader, settings: Settings, time_range: TimeRange):
    return await run_query(
        dashboard.build_grid_current(reader, time_range),
        "grid current data",
        settings.request_timeout_s,
    )


@router.get("/power-factor", response_model=list[PowerFactorPoint])
async def get_grid_power_factor(
    reader: Reader, settings: Settings, time_range: TimeRange
):
    """Return per-phase power factor with the mean as ``total``."""
    return await run_query(
        dashboard.build_grid_power_factor(reader, time_range),
        "grid power factor data",
        settings.request_timeout_s,
    )


@router.get("/frequency", response_model=list[FrequencyPoint])
async def get_grid_frequency(reader: Reader, settings: Settings, time_range: TimeRange):
    return await run_query(
        dashboard.build_grid_frequency(reader, time_range),
        "grid frequency data",
        settings.request_timeout_s,
    )
