"""
Telemetry reader: fetches raw readings, alerts and forecast rows.

``TelemetryReader`` is the read interface the dashboard service depends on.
``DatabaseTelemetryReader`` implements it over the six meter tables with an
async SQLAlchemy session, optionally caching the latest reading of each
source in Redis. The synthetic implementation used in mock mode lives in
``mock_telemetry``.

No retries are performed: a failed query raises UpstreamUnavailableError and
aborts the request.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from solar_dashboard.cache.redis_client import get_cached_reading, set_cached_reading
from solar_dashboard.core.errors import UpstreamUnavailableError
from solar_dashboard.core.sources import PowerSource, resolve_source
from solar_dashboard.db.models import READING_TABLES, Alert, ForecastDay
from solar_dashboard.models import READING_FIELDS, AlertOut, ForecastDayOut, PowerReading
from solar_dashboard.services.electrical import check_reading
from solar_dashboard.services.time_range import TimeWindow, utc

logger = logging.getLogger(__name__)


class TelemetryReader(Protocol):
    """Read access to telemetry and the auxiliary dashboard tables."""

    async def read(
        self, source: str | PowerSource, window: TimeWindow
    ) -> list[PowerReading]:
        """Return readings of *source* inside *window*, ascending by time.

        Raises:
            NotFoundError: If *source* is not a known power source.
            UpstreamUnavailableError: If the data store cannot be queried.
        """
        ...

    async def latest(self, source: str | PowerSource) -> PowerReading | None:
        """Return the newest reading of *source*, or None if it has none."""
        ...

    async def alerts(self, window: TimeWindow) -> list[AlertOut]:
        """Return alerts raised inside *window*, oldest first."""
        ...

    async def forecast_days(self) -> list[ForecastDayOut]:
        """Return the per-day production forecast rows."""
        ...


def row_to_reading(source: PowerSource, row: object) -> PowerReading:
    """Convert an ORM row of a meter table into a PowerReading."""
    return PowerReading(
        source=source,
        time=utc(row.time),
        **{field: float(getattr(row, field)) for field in READING_FIELDS},
    )


def warn_on_invalid(reading: PowerReading) -> None:
    """Log readings that break the electrical invariants; they are kept."""
    problems = check_reading(reading)
    if problems:
        logger.warning(
            "Reading %s@%s violates electrical invariants: %s",
            reading.source.value,
            reading.time.isoformat(),
            "; ".join(problems),
        )


def _before_end(column, window: TimeWindow):
    if window.end_inclusive:
        return column <= window.end
    return column < window.end


class DatabaseTelemetryReader:
    """TelemetryReader backed by the relational database.

    Args:
        session: Async SQLAlchemy session for the current request.
        redis_url: Redis URL for the latest-reading cache; empty disables it.
        cache_ttl_s: Lifetime of cached latest readings.
    """

    def __init__(
        self,
        session: AsyncSession,
        redis_url: str = "",
        cache_ttl_s: int = 5,
    ) -> None:
        self.session = session
        self.redis_url = redis_url
        self.cache_ttl_s = cache_ttl_s

    async def _execute(self, stmt, what: str):
        try:
            return await self.session.execute(stmt)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Database query for %s failed: %s", what, exc)
            raise UpstreamUnavailableError(
                f"Telemetry database unavailable while reading {what}."
            ) from exc

    async def read(
        self, source: str | PowerSource, window: TimeWindow
    ) -> list[PowerReading]:
        source = resolve_source(source)
        model = READING_TABLES[source]
        stmt = (
            select(model)
            .where(model.time >= window.start, _before_end(model.time, window))
            .order_by(model.time.asc())
        )
        result = await self._execute(stmt, source.value)
        readings = [row_to_reading(source, row) for row in result.scalars().all()]
        for reading in readings:
            warn_on_invalid(reading)

        logger.debug(
            "Read %d readings for %s in [%s, %s]",
            len(readings),
            source.value,
            window.start.isoformat(),
            window.end.isoformat(),
        )
        return readings

    async def latest(self, source: str | PowerSource) -> PowerReading | None:
        source = resolve_source(source)

        if self.redis_url:
            cached = await get_cached_reading(self.redis_url, source)
            if cached is not None:
                return cached

        model = READING_TABLES[source]
        stmt = select(model).order_by(model.time.desc()).limit(1)
        result = await self._execute(stmt, source.value)
        row = result.scalar_one_or_none()
        if row is None:
            return None

        reading = row_to_reading(source, row)
        warn_on_invalid(reading)
        if self.redis_url:
            await set_cached_reading(self.redis_url, reading, self.cache_ttl_s)
        return reading

    async def alerts(self, window: TimeWindow) -> list[AlertOut]:
        stmt = (
            select(Alert)
            .where(
                Alert.timestamp >= window.start,
                _before_end(Alert.timestamp, window),
            )
            .order_by(Alert.timestamp.asc())
        )
        result = await self._execute(stmt, "alerts")
        return [
            AlertOut(
                id=row.id,
                status=row.status,
                description=row.description,
                component=row.component,
                time=row.time,
                timestamp=row.timestamp,
            )
            for row in result.scalars().all()
        ]

    async def forecast_days(self) -> list[ForecastDayOut]:
        stmt = select(ForecastDay).order_by(ForecastDay.id.asc())
        result = await self._execute(stmt, "forecast days")
        return [
            ForecastDayOut(
                date=row.date,
                weather=row.weather,
                forecast=row.forecast,
                comparison=float(row.comparison),
            )
            for row in result.scalars().all()
        ]
