"""
Tests for time-range token resolution.

Validates the relative ranges, custom day ranges, comparison windows,
defaulting, determinism for a fixed clock, and rejection of malformed tokens.

CHANGELOG:
- 2026-10-19: Half-open comparison window, out-of-range rejection
- 2026-10-19: Initial creation

TODO:
- None
"""

from datetime import UTC, datetime, timedelta

import pytest

from solar_dashboard.core.errors import InvalidArgumentError
from solar_dashboard.services.time_range import (
    END_STEP,
    TimeWindow,
    resolve,
    utc,
)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


class TestRelativeRanges:
    """Tests for last-24h / last-7d / last-30d."""

    @pytest.mark.parametrize(
        ("token", "span"),
        [
            ("last-24h", timedelta(hours=24)),
            ("last-7d", timedelta(days=7)),
            ("last-30d", timedelta(days=30)),
        ],
    )
    def test_window_ends_at_now(self, token: str, span: timedelta) -> None:
        rng = resolve(token, now=NOW)
        assert rng.window.end == NOW
        assert rng.window.start == NOW - span
        assert rng.token == token

    def test_none_defaults_to_last_24h(self) -> None:
        assert resolve(None, now=NOW).token == "last-24h"

    def test_blank_defaults_to_last_24h(self) -> None:
        assert resolve("  ", now=NOW).window.span == timedelta(hours=24)

    def test_token_is_case_insensitive(self) -> None:
        assert resolve("LAST-7D", now=NOW).token == "last-7d"

    def test_same_now_gives_same_window(self) -> None:
        assert resolve("last-7d", now=NOW) == resolve("last-7d", now=NOW)

    def test_naive_now_is_taken_as_utc(self) -> None:
        rng = resolve("last-24h", now=NOW.replace(tzinfo=None))
        assert rng.window.end == NOW

    def test_hourly_chart_granularity_for_one_day(self) -> None:
        assert resolve("last-24h", now=NOW).chart_granularity == "hour"

    def test_daily_chart_granularity_for_a_week(self) -> None:
        assert resolve("last-7d", now=NOW).chart_granularity == "day"


class TestCustomRanges:
    """Tests for custom:YYYY-MM-DD:YYYY-MM-DD tokens."""

    def test_three_day_window_is_inclusive(self) -> None:
        rng = resolve("custom:2026-01-01:2026-01-03", now=NOW)
        assert rng.window.start == datetime(2026, 1, 1, tzinfo=UTC)
        assert rng.window.end == datetime(2026, 1, 3, 23, 59, 59, tzinfo=UTC)
        assert rng.window.contains(datetime(2026, 1, 3, 23, 59, 59, tzinfo=UTC))
        assert not rng.window.contains(datetime(2026, 1, 4, tzinfo=UTC))

    def test_single_day_window(self) -> None:
        rng = resolve("custom:2026-03-10:2026-03-10", now=NOW)
        assert rng.window.span == timedelta(hours=23, minutes=59, seconds=59)

    def test_custom_window_ignores_now(self) -> None:
        token = "custom:2026-01-01:2026-01-03"
        later = NOW + timedelta(days=40)
        assert resolve(token, now=NOW).window == resolve(token, now=later).window

    @pytest.mark.parametrize(
        "token",
        [
            "custom:2026-01-03:2026-01-01",
            "custom:2026-13-01:2026-12-31",
            "custom:yesterday:today",
            "custom:2026-01-01",
            "custom:2026-01-01:2026-01-02:2026-01-03",
        ],
    )
    def test_malformed_custom_tokens_are_rejected(self, token: str) -> None:
        with pytest.raises(InvalidArgumentError):
            resolve(token, now=NOW)


class TestComparisonWindow:
    """Tests for the preceding period used for percent changes."""

    def test_comparison_covers_the_same_length(self) -> None:
        rng = resolve("last-7d", now=NOW)
        # The closed window covers span plus its final second.
        assert rng.comparison.span == rng.window.span + END_STEP

    def test_comparison_ends_where_window_starts(self) -> None:
        rng = resolve("last-24h", now=NOW)
        assert rng.comparison.end == rng.window.start
        assert not rng.comparison.end_inclusive
        assert not rng.comparison.contains(rng.window.start)
        assert rng.window.contains(rng.window.start)

    def test_sub_second_gap_belongs_to_comparison(self) -> None:
        rng = resolve("last-24h", now=NOW)
        ts = rng.window.start - timedelta(milliseconds=400)
        assert rng.comparison.contains(ts)
        assert not rng.window.contains(ts)

    def test_custom_comparison_precedes_custom_window(self) -> None:
        rng = resolve("custom:2024-01-01:2024-01-03", now=NOW)
        assert rng.comparison.start == datetime(2023, 12, 29, tzinfo=UTC)
        assert rng.comparison.end == datetime(2024, 1, 1, tzinfo=UTC)
        last_instant = datetime(2023, 12, 31, 23, 59, 59, 999999, tzinfo=UTC)
        assert rng.comparison.contains(last_instant)

    def test_comparison_before_year_one_is_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve("custom:0001-01-01:0001-01-02", now=NOW)
        assert exc_info.value.status_code == 400
        assert "out of range" in exc_info.value.message


class TestInvalidTokens:
    @pytest.mark.parametrize("token", ["last-2h", "yesterday", "24h", "custom"])
    def test_unknown_tokens_are_rejected(self, token: str) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve(token, now=NOW)
        assert exc_info.value.status_code == 400


class TestTimeWindow:
    def test_trailing(self) -> None:
        window = TimeWindow.trailing(NOW, timedelta(hours=3))
        assert window.start == NOW - timedelta(hours=3)
        assert window.end == NOW

    def test_contains_accepts_naive_timestamps(self) -> None:
        window = TimeWindow.trailing(NOW, timedelta(hours=1))
        assert window.contains(datetime(2026, 6, 15, 11, 30))

    def test_utc_converts_offsets(self) -> None:
        from datetime import timezone

        ts = datetime(2026, 6, 15, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert utc(ts) == NOW
        assert utc(ts).tzinfo == UTC
