"""
Time-range token resolution.

Turns the ``timeRange`` query parameter used by every dashboard endpoint into
a concrete UTC query window plus the comparison window used for "% vs.
previous period" figures.

Recognised tokens:

    last-24h                      [now - 24h, now]
    last-7d                       [now - 7d,  now]
    last-30d                      [now - 30d, now]
    custom:YYYY-MM-DD:YYYY-MM-DD  [start 00:00:00, end 23:59:59]

Both ends of a request window are inclusive, so it covers its span plus one
second.
The comparison window is the immediately preceding period of the same
length: it starts one span and one second before the window and runs up to,
but not including, the window start. Every instant before the window start
belongs to exactly one of the two.

CHANGELOG:
- 2026-10-19: Comparison window ends where the window starts (half-open)
- 2026-10-19: Reject ranges outside the representable date range
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta

from solar_dashboard.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN = "last-24h"

# Resolution of inclusive window ends.
END_STEP = timedelta(seconds=1)

RELATIVE_RANGES: dict[str, timedelta] = {
    "last-24h": timedelta(hours=24),
    "last-7d": timedelta(days=7),
    "last-30d": timedelta(days=30),
}

CUSTOM_PREFIX = "custom:"

# Windows up to this span are charted per hour, longer ones per day.
HOURLY_CHART_LIMIT = timedelta(days=2)


def utc(ts: datetime) -> datetime:
    """Return *ts* as an aware UTC datetime; naive values are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


@dataclass(frozen=True)
class TimeWindow:
    """UTC interval ``[start, end]``, or ``[start, end)`` when not end_inclusive."""

    start: datetime
    end: datetime
    end_inclusive: bool = True

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def contains(self, ts: datetime) -> bool:
        ts = utc(ts)
        if self.end_inclusive:
            return self.start <= ts <= self.end
        return self.start <= ts < self.end

    def previous(self) -> TimeWindow:
        """Return the preceding period of equal length, ending at this start.

        Raises:
            OverflowError: If the period starts before ``datetime.min``.
        """
        return TimeWindow(
            start=self.start - self.span - END_STEP,
            end=self.start,
            end_inclusive=False,
        )

    @classmethod
    def trailing(cls, now: datetime, span: timedelta) -> TimeWindow:
        """Return the window of length *span* ending at *now*."""
        return cls(start=now - span, end=now)


@dataclass(frozen=True)
class ResolvedRange:
    """A parsed time-range token.

    Attributes:
        token: The token as given (normalised).
        window: Window the request is about.
        comparison: Preceding window of equal length.
    """

    token: str
    window: TimeWindow
    comparison: TimeWindow

    @property
    def chart_granularity(self) -> str:
        """Suggested bucket granularity for charting this range."""
        return "hour" if self.window.span <= HOURLY_CHART_LIMIT else "day"


def _parse_day(raw: str, token: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise InvalidArgumentError(
            f"Invalid date '{raw}' in time range '{token}'. Expected YYYY-MM-DD."
        ) from None


def _with_comparison(token: str, window: TimeWindow) -> ResolvedRange:
    try:
        comparison = window.previous()
    except OverflowError:
        raise InvalidArgumentError(
            f"Time range '{token}' is out of range. "
            "Its comparison period would start before year 1."
        ) from None
    return ResolvedRange(token=token, window=window, comparison=comparison)


def resolve(token: str | None, now: datetime | None = None) -> ResolvedRange:
    """Resolve a time-range token into query and comparison windows.

    Args:
        token: One of ``last-24h``, ``last-7d``, ``last-30d`` or
            ``custom:<start>:<end>``. ``None`` or blank means ``last-24h``.
        now: Reference instant for relative ranges. Defaults to the current
            UTC time; naive values are taken as UTC.

    Returns:
        ResolvedRange: The window and its comparison window.

    Raises:
        InvalidArgumentError: If the token is not recognised, a custom date
            does not parse, the custom end precedes its start, or the
            comparison window would start before year 1.
    """
    if token is None or not token.strip():
        token = DEFAULT_TOKEN
    token = token.strip()

    now = datetime.now(tz=UTC) if now is None else utc(now)

    span = RELATIVE_RANGES.get(token.lower())
    if span is not None:
        return _with_comparison(token.lower(), TimeWindow.trailing(now, span))

    if token.lower().startswith(CUSTOM_PREFIX):
        parts = token[len(CUSTOM_PREFIX) :].split(":")
        if len(parts) != 2:
            raise InvalidArgumentError(
                f"Invalid custom time range '{token}'. "
                "Expected custom:<YYYY-MM-DD>:<YYYY-MM-DD>."
            )
        start_day = _parse_day(parts[0], token)
        end_day = _parse_day(parts[1], token)
        if end_day < start_day:
            raise InvalidArgumentError(
                f"Custom time range '{token}' ends before it starts."
            )
        window = TimeWindow(
            start=datetime.combine(start_day, time.min, tzinfo=UTC),
            end=datetime.combine(end_day, time(23, 59, 59), tzinfo=UTC),
        )
        return _with_comparison(token, window)

    logger.debug("Rejected time range token %r", token)
    raise InvalidArgumentError(
        f"Invalid time range '{token}'. Must be one of: "
        f"{sorted(RELATIVE_RANGES)} or custom:<YYYY-MM-DD>:<YYYY-MM-DD>."
    )
