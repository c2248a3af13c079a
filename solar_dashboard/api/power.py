"""
Per-source power endpoints: latest reading and time-bucketed series.

``GET /api/power/{source}`` returns the newest raw reading of one meter,
served from the Redis latest-reading cache when it is warm.
``GET /api/power/{source}/series`` aggregates the meter's readings over the
selected window with the field policy of the aggregation service.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from solar_dashboard.api.deps import Reader, Settings, TimeRange, run_query
from solar_dashboard.core.errors import NotFoundError
from solar_dashboard.models import PowerReading, SeriesResponse
from solar_dashboard.services import dashboard
from solar_dashboard.services.aggregation import GRANULARITIES, get_granularity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/power", tags=["power"])

# ---------------------------------------------------------------------------
# Valid granularity values for documentation and validation
# ---------------------------------------------------------------------------

VALID_GRANULARITIES = sorted(GRANULARITIES)


async def _latest_or_404(reader, source: str) -> PowerReading:
    reading = await dashboard.latest_reading(reader, source)
    if reading is None:
        raise NotFoundError(f"No data found for source '{source}'.")
    return reading


@router.get("/{source}", response_model=PowerReading)
async def get_latest_power(
    source: str, reader: Reader, settings: Settings, time_range: TimeRange
):
    """Return the most recent reading of a source.

    Args:
        source: Source identifier, e.g. ``grid1`` or ``inverter2``.
        reader: Telemetry reader for the configured data mode.
        settings: Application settings.
        time_range: Validated but not applied; the newest reading is always
            returned.

    Raises:
        NotFoundError: 404 if the source is unknown or has no readings.
    """
    return await run_query(
        _latest_or_404(reader, source),
        f"{source} power data",
        settings.request_timeout_s,
    )


@router.get("/{source}/series", response_model=SeriesResponse)
async def get_power_series(
    source: str,
    reader: Reader,
    settings: Settings,
    time_range: TimeRange,
    granularity: Annotated[
        str | None,
        Query(description=f"Bucket size: one of {VALID_GRANULARITIES}."),
    ] = None,
) -> SeriesResponse:
    """Return time-bucketed aggregates of one source.

    Args:
        source: Source identifier.
        reader: Telemetry reader for the configured data mode.
        settings: Application settings.
        time_range: Window to aggregate.
        granularity: Bucket size; hourly up to two days, daily beyond.

    Raises:
        InvalidArgumentError: 400 if granularity is not recognised.
        NotFoundError: 404 if the source is unknown.
    """
    if granularity is not None:
        get_granularity(granularity)

    return await run_query(
        dashboard.build_source_series(reader, source, time_range, granularity),
        f"{source} series data",
        settings.request_timeout_s,
    )
