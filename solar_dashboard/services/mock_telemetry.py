"""
Deterministic synthetic telemetry for mock data mode.

Generates readings for every source on a fixed time grid. Each sample is a
pure function of ``(seed, source, timestamp)``: the same request always gets
the same numbers, and overlapping windows agree on shared samples. Values are
built through ``electrical.build_reading`` so they satisfy the same
invariants stored readings are checked against.

Inverters follow a daylight curve peaking at 12:00 UTC; generators run at a
steady level; energy counters grow linearly from a fixed reference instant.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from solar_dashboard.core.sources import PowerSource, SourceKind, resolve_source
from solar_dashboard.models import AlertOut, ForecastDayOut, PowerReading
from solar_dashboard.services.electrical import build_reading
from solar_dashboard.services.static_data import FORECAST_DAYS, mock_alerts
from solar_dashboard.services.time_range import TimeWindow

COUNTER_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


@dataclass(frozen=True)
class SourceProfile:
    """Operating point of a synthetic source.

    Attributes:
        power_kw: Nominal total real power.
        variance: Relative jitter applied to power_kw (0.1 = +/-10%).
        import_rate: Growth of kwh_import in kWh per hour.
        export_rate: Growth of kwh_export in kWh per hour.
    """

    power_kw: float
    variance: float
    import_rate: float
    export_rate: float


PROFILES: dict[PowerSource, SourceProfile] = {
    PowerSource.GRID1: SourceProfile(18.0, 0.1, 12.0, 5.0),
    PowerSource.GRID2: SourceProfile(12.0, 0.12, 8.0, 3.0),
    PowerSource.GENERATOR1: SourceProfile(80.0, 0.12, 0.2, 64.0),
    PowerSource.GENERATOR2: SourceProfile(50.0, 0.16, 0.2, 40.0),
    PowerSource.INVERTER1: SourceProfile(40.0, 0.12, 0.1, 16.0),
    PowerSource.INVERTER2: SourceProfile(25.0, 0.12, 0.1, 10.0),
}


def daylight_factor(ts: datetime) -> float:
    """Return solar output relative to peak for a UTC instant (0 at night)."""
    hour = ts.hour + ts.minute / 60
    return max(0.0, math.sin(math.pi * (hour - 6) / 12))


def synthesize(seed: int, source: PowerSource, ts: datetime) -> PowerReading:
    """Build the synthetic reading of *source* at *ts*."""
    profile = PROFILES[source]
    rng = random.Random(f"{seed}:{source.value}:{int(ts.timestamp())}")

    power = profile.power_kw * (1 + rng.uniform(-profile.variance, profile.variance))
    if source.kind is SourceKind.INVERTER:
        power *= daylight_factor(ts)

    voltages = tuple(230 + rng.uniform(-5, 5) for _ in range(3))
    power_factors = tuple(0.8 + rng.uniform(0, 0.15) for _ in range(3))
    # Per-phase current that yields power/3 kW at the chosen v and pf.
    currents = tuple(
        power / 3 * 1000 / (v * pf) for v, pf in zip(voltages, power_factors)
    )

    hours = (ts - COUNTER_EPOCH).total_seconds() / 3600
    kwh_import = 100 + profile.import_rate * hours
    kwh_export = 50 + profile.export_rate * hours

    return build_reading(
        source=source,
        time=ts,
        voltages=voltages,
        currents=currents,
        power_factors=power_factors,
        hz=50 + rng.uniform(-0.2, 0.2),
        kwh_import=kwh_import,
        kwh_export=kwh_export,
        kvarh_import=kwh_import * 0.3,
        kvarh_export=kwh_export * 0.3,
    )


class MockTelemetryReader:
    """TelemetryReader over synthetic data.

    Args:
        seed: Generator seed.
        sample_interval_s: Nominal spacing of samples.
        max_samples: Upper bound on samples per source per read; the spacing
            widens for long windows to respect it.
        clock: Returns the current UTC time; no samples exist after it.
    """

    def __init__(
        self,
        seed: int = 42,
        sample_interval_s: int = 900,
        max_samples: int = 2000,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.seed = seed
        self.sample_interval_s = sample_interval_s
        self.max_samples = max_samples
        self.clock = clock or (lambda: datetime.now(tz=UTC))

    def _step(self, window: TimeWindow) -> int:
        span_s = max(window.span.total_seconds(), 0)
        return max(self.sample_interval_s, math.ceil(span_s / self.max_samples))

    async def read(
        self, source: str | PowerSource, window: TimeWindow
    ) -> list[PowerReading]:
        source = resolve_source(source)
        end = min(window.end, self.clock())
        if end < window.start:
            return []

        step = self._step(window)
        first = math.ceil(window.start.timestamp() / step) * step
        last = int(end.timestamp())
        times = (
            datetime.fromtimestamp(epoch, tz=UTC) for epoch in range(first, last + 1, step)
        )
        return [synthesize(self.seed, source, ts) for ts in times if window.contains(ts)]

    async def latest(self, source: str | PowerSource) -> PowerReading | None:
        source = resolve_source(source)
        now = self.clock()
        epoch = int(now.timestamp()) // self.sample_interval_s * self.sample_interval_s
        return synthesize(self.seed, source, datetime.fromtimestamp(epoch, tz=UTC))

    async def alerts(self, window: TimeWindow) -> list[AlertOut]:
        return [
            alert
            for alert in mock_alerts(self.clock())
            if alert.timestamp is not None and window.contains(alert.timestamp)
        ]

    async def forecast_days(self) -> list[ForecastDayOut]:
        return list(FORECAST_DAYS)

    def __repr__(self) -> str:
        return (
            f"MockTelemetryReader(seed={self.seed!r}, "
            f"sample_interval_s={self.sample_interval_s!r})"
        )
