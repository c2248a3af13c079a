"""
Energy endpoints: production chart, distribution, forecast and history.

``/api/energy/daily`` serves the same points as ``/api/energy/chart`` for
dashboards built against the older route name, and keeps that route's
error message.

CHANGELOG:
- 2026-10-19: Separate handler for the older daily route
- 2026-10-19: Initial creation

TODO:
- None
"""

from fastapi import APIRouter

from solar_dashboard.api.deps import (
    Clock,
    Reader,
    Settings,
    TimeRange,
    WeeklyRange,
    run_query,
)
from solar_dashboard.models import (
    DailyHistoryPoint,
    DistributionEntry,
    EnergyChartPoint,
    EnergyForecast,
    MonthlyHistoryPoint,
    YearlyHistoryPoint,
)
from solar_dashboard.services import dashboard

router = APIRouter(prefix="/api/energy", tags=["energy"])


@router.get("/chart", response_model=list[EnergyChartPoint])
async def get_energy_chart(reader: Reader, settings: Settings, time_range: TimeRange):
    """Return production, consumption and net grid exchange per bucket.

    Buckets are hourly for ranges of up to two days and daily otherwise.
    """
    return await run_query(
        dashboard.build_energy_chart(reader, time_range),
        "energy chart data",
        settings.request_timeout_s,
    )


@router.get("/daily", response_model=list[EnergyChartPoint])
async def get_energy_daily(reader: Reader, settings: Settings, time_range: TimeRange):
    return await run_query(
        dashboard.build_energy_chart(reader, time_range),
        "energy data",
        settings.request_timeout_s,
    )


@router.get("/distribution", response_model=list[DistributionEntry])
async def get_distribution(reader: Reader, settings: Settings, time_range: TimeRange):
    """Return the grid import / generation / grid export split."""
    return await run_query(
        dashboard.build_distribution(reader, time_range, settings),
        "energy distribution data",
        settings.request_timeout_s,
    )


@router.get("/forecast", response_model=EnergyForecast)
async def get_forecast(reader: Reader, settings: Settings, time_range: WeeklyRange):
    """Return the production forecast; the range defaults to ``last-7d``."""
    return await run_query(
        dashboard.build_forecast(reader, time_range, settings),
        "forecast data",
        settings.request_timeout_s,
    )


# ---------------------------------------------------------------------------
# History: fixed trailing windows, timeRange is validated but not applied
# ---------------------------------------------------------------------------


@router.get("/history/daily", response_model=list[DailyHistoryPoint])
async def get_daily_history(
    reader: Reader, settings: Settings, clock: Clock, time_range: TimeRange
):
    """Return the last seven days, one point per day."""
    return await run_query(
        dashboard.build_history(reader, "daily", now=clock()),
        "daily history data",
        settings.request_timeout_s,
    )


@router.get("/history/monthly", response_model=list[MonthlyHistoryPoint])
async def get_monthly_history(
    reader: Reader, settings: Settings, clock: Clock, time_range: TimeRange
):
    """Return the last 365 days, one point per month."""
    return await run_query(
        dashboard.build_history(reader, "monthly", now=clock()),
        "monthly history data",
        settings.request_timeout_s,
    )


@router.get("/history/yearly", response_model=list[YearlyHistoryPoint])
async def get_yearly_history(
    reader: Reader, settings: Settings, clock: Clock, time_range: TimeRange
):
    """Return the last five years, one point per year."""
    return await run_query(
        dashboard.build_history(reader, "yearly", now=clock()),
        "yearly history data",
        settings.request_timeout_s,
    )
