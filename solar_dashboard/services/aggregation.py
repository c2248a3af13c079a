"""
Aggregation service for time-bucketed telemetry.

Groups raw readings into hour/day/month/year buckets (UTC) and reduces each
bucket field by field. The GRANULARITIES dict maps granularity names to the
functions that truncate a timestamp to its bucket start and find the next
bucket boundary.

Field policy:

    summed       kw*, kva*, kvar*              rate samples added up
    cumulative   kwh_*, kvarh_*                last - first, clamped at 0
    averaged     v*, a*, pf*, hz               arithmetic mean

A bucket's cumulative delta only sees the readings inside that bucket, so
energy that accrues between the last reading of one bucket and the first of
the next is not attributed to either.

CHANGELOG:
- 2026-10-19: Replace continuous-aggregate view queries with in-process bucketing

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from solar_dashboard.core.errors import InvalidArgumentError
from solar_dashboard.core.sources import PowerSource
from solar_dashboard.models import READING_FIELDS, PowerReading
from solar_dashboard.services.time_range import utc

logger = logging.getLogger(__name__)

SUMMED_FIELDS: frozenset[str] = frozenset(
    (
        "kw1", "kw2", "kw3", "kwt",
        "kva1", "kva2", "kva3", "kvat",
        "kvar1", "kvar2", "kvar3", "kvart",
    )
)  # fmt: skip
CUMULATIVE_FIELDS: frozenset[str] = frozenset(
    ("kwh_import", "kwh_export", "kvarh_import", "kvarh_export")
)
AVERAGED_FIELDS: frozenset[str] = frozenset(
    f for f in READING_FIELDS if f not in SUMMED_FIELDS and f not in CUMULATIVE_FIELDS
)


# ---------------------------------------------------------------------------
# Granularities
# ---------------------------------------------------------------------------


def _truncate_hour(ts: datetime) -> datetime:
    return ts.replace(minute=0, second=0, microsecond=0)


def _truncate_day(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def _truncate_month(ts: datetime) -> datetime:
    return _truncate_day(ts).replace(day=1)


def _truncate_year(ts: datetime) -> datetime:
    return _truncate_month(ts).replace(month=1)


def _next_month(start: datetime) -> datetime:
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


@dataclass(frozen=True)
class Granularity:
    """Bucket size for aggregation.

    Attributes:
        name: ``hour``, ``day``, ``month`` or ``year``.
        truncate: Maps a UTC timestamp to the start of its bucket.
        advance: Maps a bucket start to the start of the next bucket.
    """

    name: str
    truncate: Callable[[datetime], datetime]
    advance: Callable[[datetime], datetime]


GRANULARITIES: dict[str, Granularity] = {
    "hour": Granularity("hour", _truncate_hour, lambda s: s + timedelta(hours=1)),
    "day": Granularity("day", _truncate_day, lambda s: s + timedelta(days=1)),
    "month": Granularity("month", _truncate_month, _next_month),
    "year": Granularity("year", _truncate_year, lambda s: s.replace(year=s.year + 1)),
}


def get_granularity(name: str) -> Granularity:
    """Look up a granularity by name.

    Raises:
        InvalidArgumentError: If *name* is not a known granularity.
    """
    try:
        return GRANULARITIES[name.lower()]
    except KeyError:
        raise InvalidArgumentError(
            f"Invalid granularity '{name}'. Must be one of: {sorted(GRANULARITIES)}."
        ) from None


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AggregateBucket:
    """Aggregated readings of one source over one time bucket.

    Attributes:
        source: Meter the readings came from.
        granularity: Bucket size name.
        start: Bucket start (inclusive, UTC).
        end: Next bucket start (exclusive, UTC).
        sample_count: Number of readings reduced into the bucket.
        values: One aggregated value per reading field.
    """

    source: PowerSource
    granularity: str
    start: datetime
    end: datetime
    sample_count: int
    values: dict[str, float]

    def __getitem__(self, field: str) -> float:
        return self.values[field]


def _reduce(readings: Sequence[PowerReading]) -> dict[str, float]:
    """Apply the field policy to a non-empty, time-ordered group of readings."""
    count = len(readings)
    first, last = readings[0], readings[-1]
    values: dict[str, float] = {}
    for field in READING_FIELDS:
        if field in CUMULATIVE_FIELDS:
            # Counter resets show up as a negative delta.
            values[field] = max(getattr(last, field) - getattr(first, field), 0.0)
        elif field in SUMMED_FIELDS:
            values[field] = sum(getattr(r, field) for r in readings)
        else:
            values[field] = sum(getattr(r, field) for r in readings) / count
    return values


def aggregate(
    readings: Iterable[PowerReading],
    granularity: str | Granularity,
) -> list[AggregateBucket]:
    """Group readings into time buckets and aggregate each bucket.

    Every reading lands in exactly one bucket, keyed by its UTC timestamp
    truncated to the granularity. Readings may come from any number of
    sources; each (source, bucket) pair yields its own AggregateBucket.

    Args:
        readings: Raw readings in any order.
        granularity: Granularity name or instance.

    Returns:
        list[AggregateBucket]: Buckets ordered by start, then source.
        Empty input gives an empty list.

    Raises:
        InvalidArgumentError: If the granularity name is unknown.
    """
    gran = (
        granularity
        if isinstance(granularity, Granularity)
        else get_granularity(granularity)
    )

    groups: dict[tuple[datetime, PowerSource], list[PowerReading]] = {}
    for reading in sorted(readings, key=lambda r: utc(r.time)):
        key = (gran.truncate(utc(reading.time)), reading.source)
        groups.setdefault(key, []).append(reading)

    buckets = [
        AggregateBucket(
            source=source,
            granularity=gran.name,
            start=start,
            end=gran.advance(start),
            sample_count=len(group),
            values=_reduce(group),
        )
        for (start, source), group in sorted(
            groups.items(), key=lambda item: (item[0][0], item[0][1].value)
        )
    ]

    logger.debug(
        "Aggregated %d readings into %d %s buckets",
        sum(b.sample_count for b in buckets),
        len(buckets),
        gran.name,
    )
    return buckets


def summarize(readings: Sequence[PowerReading]) -> dict[str, float]:
    """Reduce a single source's readings over their whole span.

    Uses the same field policy as :func:`aggregate` with one bucket that
    covers the entire input.

    Returns:
        dict[str, float]: One value per reading field; all zeros when
        *readings* is empty.
    """
    if not readings:
        return dict.fromkeys(READING_FIELDS, 0.0)
    return _reduce(sorted(readings, key=lambda r: utc(r.time)))


def sum_by_bucket(
    buckets: Iterable[AggregateBucket],
    field: str,
) -> dict[datetime, float]:
    """Add one field across sources for each bucket start.

    Args:
        buckets: Buckets from one or more sources, same granularity.
        field: Reading field to add up.

    Returns:
        dict[datetime, float]: Bucket start -> total, ordered by start.
    """
    totals: dict[datetime, float] = {}
    for bucket in buckets:
        totals[bucket.start] = totals.get(bucket.start, 0.0) + bucket[field]
    return dict(sorted(totals.items()))
