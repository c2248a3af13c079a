"""
FastAPI dependency injection providers.

Provides the settings, the telemetry reader for the configured data mode,
the resolved ``timeRange`` query parameter, and the wrapper that bounds
every dashboard computation by REQUEST_TIMEOUT_S.

CHANGELOG:
- 2026-10-19: Provide reader and time range instead of raw DB sessions
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime
from typing import Annotated, TypeVar

from fastapi import Depends, Query, Request

from solar_dashboard.core.config import DashboardSettings
from solar_dashboard.core.errors import (
    DashboardError,
    DataFetchError,
    RequestTimeoutError,
)
from solar_dashboard.db.session import session_scope
from solar_dashboard.services import time_range
from solar_dashboard.services.mock_telemetry import MockTelemetryReader
from solar_dashboard.services.telemetry import DatabaseTelemetryReader, TelemetryReader

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_settings(request: Request) -> DashboardSettings:
    """Return the settings the application was created with."""
    return request.app.state.settings


def get_clock(request: Request) -> Callable[[], datetime]:
    """Return the clock used for relative time ranges and mock data."""
    return request.app.state.clock


async def get_reader(request: Request) -> AsyncGenerator[TelemetryReader, None]:
    """Yield the telemetry reader for the configured data mode.

    In database mode a session is opened from ``app.state.session_factory``
    for the duration of the request.

    Yields:
        TelemetryReader: Mock or database-backed reader.
    """
    settings: DashboardSettings = request.app.state.settings
    if settings.data_mode == "mock":
        yield MockTelemetryReader(
            seed=settings.mock_seed,
            sample_interval_s=settings.mock_sample_interval_s,
            max_samples=settings.mock_max_samples,
            clock=request.app.state.clock,
        )
        return

    async for session in session_scope(request.app.state.session_factory):
        yield DatabaseTelemetryReader(
            session,
            redis_url=settings.redis_url,
            cache_ttl_s=settings.cache_ttl_s,
        )


def time_range_param(default: str = time_range.DEFAULT_TOKEN):
    """Build a dependency resolving the ``timeRange`` query parameter.

    Args:
        default: Token used when the client sends none.

    Returns:
        Callable: FastAPI dependency returning a ResolvedRange.
    """

    def dependency(
        request: Request,
        token: Annotated[
            str | None,
            Query(
                alias="timeRange",
                description="last-24h, last-7d, last-30d or custom:<start>:<end>.",
            ),
        ] = None,
    ) -> time_range.ResolvedRange:
        return time_range.resolve(token or default, now=request.app.state.clock())

    return dependency


async def run_query(
    operation: Awaitable[T],
    what: str,
    timeout_s: float,
) -> T:
    """Await a dashboard computation under the request timeout.

    Dashboard errors pass through unchanged; anything else is logged with
    its traceback and reported as ``Failed to fetch <what>``.

    Args:
        operation: The computation to await.
        what: Name of the payload, used in the error message.
        timeout_s: Upper bound in seconds.

    Raises:
        RequestTimeoutError: If the computation exceeds timeout_s.
        DataFetchError: On any unexpected failure.
    """
    try:
        return await asyncio.wait_for(operation, timeout=timeout_s)
    except DashboardError:
        raise
    except TimeoutError:
        logger.error("Fetching %s timed out after %.1fs", what, timeout_s)
        raise RequestTimeoutError(
            f"Timed out fetching {what} after {timeout_s:g}s"
        ) from None
    except Exception as exc:
        logger.exception("Failed to fetch %s", what)
        raise DataFetchError(f"Failed to fetch {what}") from exc


Settings = Annotated[DashboardSettings, Depends(get_settings)]
Clock = Annotated[Callable[[], datetime], Depends(get_clock)]
Reader = Annotated[TelemetryReader, Depends(get_reader)]
TimeRange = Annotated[time_range.ResolvedRange, Depends(time_range_param())]
WeeklyRange = Annotated[time_range.ResolvedRange, Depends(time_range_param("last-7d"))]
