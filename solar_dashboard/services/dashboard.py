"""
Dashboard service: builds every widget payload from raw telemetry.

Each public coroutine performs one sequential read fan-out through a
TelemetryReader, buckets the readings with the aggregation service, and
derives KPIs, deltas and distributions with the metrics and distribution
calculators. Nothing is cached or shared between calls.

Energy conventions used throughout:

    production   summed kwt of generator and inverter sources
    grid import  kwh_import counter deltas of the grid meters
    grid export  kwh_export counter deltas of the grid meters
    consumption  production + grid import - grid export, floored at 0

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from itertools import chain
from statistics import fmean

from solar_dashboard.core.config import DashboardSettings
from solar_dashboard.core.sources import (
    ALL_SOURCES,
    GENERATION_SOURCES,
    GENERATOR_SOURCES,
    GRID_SOURCES,
    PowerSource,
    resolve_source,
)
from solar_dashboard.models import (
    AlertOut,
    BucketOut,
    Co2Kpi,
    DailyHistoryPoint,
    DistributionEntry,
    EnergyChartPoint,
    EnergyForecast,
    EnergyKpi,
    FrequencyPoint,
    GeneratorGroup,
    GeneratorOutputPoint,
    GeneratorPerformance,
    GridChartPoint,
    GridKpi,
    GridStatus,
    HistoryPoint,
    MonthlyHistoryPoint,
    PhaseSeriesPoint,
    PowerFactorPoint,
    PowerKpi,
    PowerReading,
    SeriesResponse,
    SolarRadiationPoint,
    SystemComponent,
    YearlyHistoryPoint,
)
from solar_dashboard.services.aggregation import aggregate, summarize, sum_by_bucket
from solar_dashboard.services.distribution import compute_distribution
from solar_dashboard.services.metrics import (
    efficiency,
    format_quantity,
    net_energy_balance,
    percent_change,
    power_factor_total,
)
from solar_dashboard.services.telemetry import TelemetryReader
from solar_dashboard.services.time_range import ResolvedRange, TimeWindow

logger = logging.getLogger(__name__)

Readings = dict[PowerSource, list[PowerReading]]

CHART_DECIMALS = 2

SOLAR_RADIATION_WINDOW = timedelta(hours=3)
# kW of inverter output shown as W/m^2 on the solar radiation chart.
RADIATION_PER_KW = 100


# ---------------------------------------------------------------------------
# Reading helpers
# ---------------------------------------------------------------------------


async def read_sources(
    reader: TelemetryReader,
    sources: Iterable[PowerSource],
    window: TimeWindow,
) -> Readings:
    """Read several sources one after another over the same window."""
    readings: Readings = {}
    for source in sources:
        readings[source] = await reader.read(source, window)
    return readings


def _select(readings: Readings, sources: Iterable[PowerSource]) -> list[PowerReading]:
    return list(chain.from_iterable(readings.get(s, []) for s in sources))


def _total(readings: Readings, sources: Iterable[PowerSource], field: str) -> float:
    """Window total of *field* over *sources*, one summary per source."""
    return sum(summarize(readings.get(s, []))[field] for s in sources)


def _mean_total_power(readings: Readings) -> float:
    """Sum over sources of each source's mean kwt in the window."""
    means = [
        fmean(r.kwt for r in source_readings)
        for source_readings in readings.values()
        if source_readings
    ]
    return sum(means)


def _mean_power_factor(readings: Readings) -> float:
    values = [r.pft for r in chain.from_iterable(readings.values())]
    return fmean(values) if values else 0.0


@dataclass(frozen=True)
class EnergyFlow:
    """Production and grid exchange of one bucket."""

    production: float
    grid_import: float
    grid_export: float

    @property
    def consumption(self) -> float:
        return max(self.production + self.grid_import - self.grid_export, 0.0)


def energy_flow_by_bucket(readings: Readings, granularity: str) -> dict[datetime, EnergyFlow]:
    """Bucket production and grid exchange across all sources.

    Returns:
        dict[datetime, EnergyFlow]: Bucket start -> flow, ordered by start.
    """
    generation = sum_by_bucket(
        aggregate(_select(readings, GENERATION_SOURCES), granularity), "kwt"
    )
    grid_buckets = aggregate(_select(readings, GRID_SOURCES), granularity)
    imports = sum_by_bucket(grid_buckets, "kwh_import")
    exports = sum_by_bucket(grid_buckets, "kwh_export")

    starts = sorted(set(generation) | set(imports))
    return {
        start: EnergyFlow(
            production=generation.get(start, 0.0),
            grid_import=imports.get(start, 0.0),
            grid_export=exports.get(start, 0.0),
        )
        for start in starts
    }


# ---------------------------------------------------------------------------
# KPIs
# ---------------------------------------------------------------------------


async def build_kpis(
    reader: TelemetryReader,
    time_range: ResolvedRange,
    settings: DashboardSettings,
) -> list[PowerKpi | EnergyKpi | GridKpi | Co2Kpi]:
    """Build the KPI tiles, each compared against the preceding period.

    Returns:
        list: Current Power, Energy Produced, Grid Import, CO2 Avoided and
        Power Factor KPIs.
    """
    decimals = settings.decimal_places
    current = await read_sources(reader, ALL_SOURCES, time_range.window)
    baseline = await read_sources(reader, ALL_SOURCES, time_range.comparison)
    latest = [r for r in [await reader.latest(s) for s in ALL_SOURCES] if r is not None]

    current_power = sum(r.kwt for r in latest)
    energy_now = _total(current, GENERATION_SOURCES, "kwt")
    energy_before = _total(baseline, GENERATION_SOURCES, "kwt")
    import_now = _total(current, GRID_SOURCES, "kwh_import")
    import_before = _total(baseline, GRID_SOURCES, "kwh_import")
    latest_pf = (
        fmean(power_factor_total(r.pf1, r.pf2, r.pf3) for r in latest) if latest else 0.0
    )

    return [
        PowerKpi(
            id="kpi1",
            title="Current Power",
            value=format_quantity(current_power, "kW", 2),
            change=percent_change(
                _mean_total_power(current), _mean_total_power(baseline), decimals
            ),
        ),
        EnergyKpi(
            id="kpi2",
            title="Energy Produced",
            value=format_quantity(energy_now, "kWh"),
            change=percent_change(energy_now, energy_before, decimals),
        ),
        GridKpi(
            id="kpi3",
            title="Grid Import",
            value=format_quantity(import_now, "kWh"),
            change=percent_change(import_now, import_before, decimals),
        ),
        Co2Kpi(
            id="kpi4",
            title="CO₂ Avoided",
            value=format_quantity(energy_now * settings.co2_kg_per_kwh, "kg"),
            change=percent_change(
                energy_now * settings.co2_kg_per_kwh,
                energy_before * settings.co2_kg_per_kwh,
                decimals,
            ),
        ),
        PowerKpi(
            id="kpi5",
            title="Power Factor",
            value=f"{latest_pf:.2f}",
            change=percent_change(
                _mean_power_factor(current), _mean_power_factor(baseline), decimals
            ),
        ),
    ]


# ---------------------------------------------------------------------------
# Energy
# ---------------------------------------------------------------------------


async def build_energy_chart(
    reader: TelemetryReader,
    time_range: ResolvedRange,
) -> list[EnergyChartPoint]:
    """Production, consumption and net grid exchange per chart bucket."""
    readings = await read_sources(reader, ALL_SOURCES, time_range.window)
    flows = energy_flow_by_bucket(readings, time_range.chart_granularity)
    return [
        EnergyChartPoint(
            time=start,
            production=round(flow.production, CHART_DECIMALS),
            consumption=round(flow.consumption, CHART_DECIMALS),
            grid=round(flow.grid_import - flow.grid_export, CHART_DECIMALS),
        )
        for start, flow in flows.items()
    ]


async def build_distribution(
    reader: TelemetryReader,
    time_range: ResolvedRange,
    settings: DashboardSettings,
) -> list[DistributionEntry]:
    """Grid import / generation / grid export split over the window."""
    readings = await read_sources(
        reader, GRID_SOURCES + GENERATION_SOURCES, time_range.window
    )
    return compute_distribution(
        grid_import=_total(readings, GRID_SOURCES, "kwh_import"),
        generation=_total(readings, GENERATION_SOURCES, "kwt"),
        grid_export=_total(readings, GRID_SOURCES, "kwh_export"),
        decimals=settings.decimal_places,
    )


async def build_forecast(
    reader: TelemetryReader,
    time_range: ResolvedRange,
    settings: DashboardSettings,
) -> EnergyForecast:
    """Forecast rows plus production over the window vs the previous one."""
    days = await reader.forecast_days()
    current = await read_sources(reader, GENERATION_SOURCES, time_range.window)
    baseline = await read_sources(reader, GENERATION_SOURCES, time_range.comparison)
    total_now = _total(current, GENERATION_SOURCES, "kwt")
    total_before = _total(baseline, GENERATION_SOURCES, "kwt")
    return EnergyForecast(
        days=days,
        weekly_total=f"{total_now:.1f}",
        weekly_change=percent_change(total_now, total_before, settings.decimal_places),
    )


@dataclass(frozen=True)
class HistoryConfig:
    """Window, bucket size and label format of one history view.

    Attributes:
        span: Length of the trailing window.
        granularity: Bucket granularity name.
        label_format: strftime format for the period label.
        point_type: Response model carrying the period label.
        label_field: Name of the label field on point_type.
    """

    span: timedelta
    granularity: str
    label_format: str
    point_type: type[HistoryPoint]
    label_field: str


HISTORY_CONFIG: dict[str, HistoryConfig] = {
    "daily": HistoryConfig(timedelta(days=7), "day", "%b %d", DailyHistoryPoint, "date"),
    "monthly": HistoryConfig(
        timedelta(days=365), "month", "%b %Y", MonthlyHistoryPoint, "month"
    ),
    "yearly": HistoryConfig(
        timedelta(days=5 * 365), "year", "%Y", YearlyHistoryPoint, "year"
    ),
}


async def build_history(
    reader: TelemetryReader,
    view: str,
    now: datetime | None = None,
) -> list[HistoryPoint]:
    """Production, consumption and grid export per day, month or year.

    Args:
        reader: Telemetry source.
        view: ``daily``, ``monthly`` or ``yearly`` (a HISTORY_CONFIG key).
        now: End of the trailing window; defaults to the current UTC time.

    Raises:
        KeyError: If view is not a valid HISTORY_CONFIG key.
    """
    config = HISTORY_CONFIG[view]
    window = TimeWindow.trailing(now or datetime.now(tz=UTC), config.span)
    readings = await read_sources(reader, ALL_SOURCES, window)
    flows = energy_flow_by_bucket(readings, config.granularity)
    return [
        config.point_type(
            **{config.label_field: start.strftime(config.label_format)},
            production=round(flow.production, CHART_DECIMALS),
            consumption=round(flow.consumption, CHART_DECIMALS),
            grid_export=round(flow.grid_export, CHART_DECIMALS),
        )
        for start, flow in flows.items()
    ]


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


async def build_grid_status(
    reader: TelemetryReader,
    time_range: ResolvedRange,
    settings: DashboardSettings,
) -> GridStatus:
    """Grid exchange totals, their deltas, live voltage/frequency, chart data."""
    decimals = settings.decimal_places
    current = await read_sources(reader, GRID_SOURCES, time_range.window)
    baseline = await read_sources(reader, GRID_SOURCES, time_range.comparison)
    latest = await reader.latest(PowerSource.GRID1)

    import_now = _total(current, GRID_SOURCES, "kwh_import")
    export_now = _total(current, GRID_SOURCES, "kwh_export")
    balance = net_energy_balance(import_now, export_now)

    grid_buckets = aggregate(_select(current, GRID_SOURCES), time_range.chart_granularity)
    imports = sum_by_bucket(grid_buckets, "kwh_import")
    exports = sum_by_bucket(grid_buckets, "kwh_export")

    return GridStatus(
        status="Connected" if latest is not None and latest.kwt > 0 else "Disconnected",
        last_checked=latest.time if latest is not None else None,
        import_kwh=format_quantity(import_now, "kWh"),
        import_change=percent_change(
            import_now, _total(baseline, GRID_SOURCES, "kwh_import"), decimals
        ),
        export_kwh=format_quantity(export_now, "kWh"),
        export_change=percent_change(
            export_now, _total(baseline, GRID_SOURCES, "kwh_export"), decimals
        ),
        net_balance=format_quantity(balance.value, "kWh"),
        net_balance_label=balance.label,
        voltage=format_quantity(
            fmean((latest.v1, latest.v2, latest.v3)) if latest else 0.0, "V"
        ),
        frequency=format_quantity(latest.hz if latest else 0.0, "Hz", 2),
        chart_data=[
            GridChartPoint(
                time=start,
                import_kwh=round(imports[start], CHART_DECIMALS),
                export_kwh=round(exports[start], CHART_DECIMALS),
            )
            for start in imports
        ],
    )


async def build_grid_voltage(
    reader: TelemetryReader, time_range: ResolvedRange
) -> list[PhaseSeriesPoint]:
    readings = await reader.read(PowerSource.GRID1, time_range.window)
    return [
        PhaseSeriesPoint(time=r.time, phase_a=r.v1, phase_b=r.v2, phase_c=r.v3)
        for r in readings
    ]


async def build_grid_current(
    reader: TelemetryReader, time_range: ResolvedRange
) -> list[PhaseSeriesPoint]:
    readings = await reader.read(PowerSource.GRID1, time_range.window)
    return [
        PhaseSeriesPoint(time=r.time, phase_a=r.a1, phase_b=r.a2, phase_c=r.a3)
        for r in readings
    ]


async def build_grid_power_factor(
    reader: TelemetryReader, time_range: ResolvedRange
) -> list[PowerFactorPoint]:
    readings = await reader.read(PowerSource.GRID1, time_range.window)
    return [
        PowerFactorPoint(
            time=r.time,
            phase_a=r.pf1,
            phase_b=r.pf2,
            phase_c=r.pf3,
            total=power_factor_total(r.pf1, r.pf2, r.pf3),
        )
        for r in readings
    ]


async def build_grid_frequency(
    reader: TelemetryReader, time_range: ResolvedRange
) -> list[FrequencyPoint]:
    readings = await reader.read(PowerSource.GRID1, time_range.window)
    return [FrequencyPoint(time=r.time, frequency=r.hz) for r in readings]


# ---------------------------------------------------------------------------
# Generators, system status, sources
# ---------------------------------------------------------------------------


async def build_generator_performance(
    reader: TelemetryReader,
    settings: DashboardSettings,
) -> GeneratorPerformance:
    """Latest output and efficiency of each generator."""
    groups: list[GeneratorGroup] = []
    total = 0.0
    for idx, source in enumerate(GENERATOR_SOURCES, start=1):
        latest = await reader.latest(source)
        output = latest.kwt if latest is not None else 0.0
        total += output
        groups.append(
            GeneratorGroup(
                id=f"gg{idx}",
                name=source.label,
                output=format_quantity(output, "kW"),
                efficiency=round(efficiency(output, settings.rated_capacity_kw), 1),
            )
        )
    return GeneratorPerformance(groups=groups, total_output=format_quantity(total, "kW"))


async def build_generator_hourly(
    reader: TelemetryReader,
    time_range: ResolvedRange,
) -> list[GeneratorOutputPoint]:
    """Summed generator output per hour over the window."""
    readings = await read_sources(reader, GENERATOR_SOURCES, time_range.window)
    totals = sum_by_bucket(aggregate(_select(readings, GENERATOR_SOURCES), "hour"), "kwt")
    return [
        GeneratorOutputPoint(time=start, output=round(value, CHART_DECIMALS))
        for start, value in totals.items()
    ]


async def build_system_status(reader: TelemetryReader) -> list[SystemComponent]:
    """One status entry per metered source from its latest reading."""
    components: list[SystemComponent] = []
    for idx, source in enumerate(ALL_SOURCES, start=1):
        latest = await reader.latest(source)
        if latest is None:
            status, details = "No Data", "No readings"
        else:
            status = "Online" if latest.kwt > 0 else "Offline"
            details = format_quantity(latest.kwt, "kW", 2)
        components.append(
            SystemComponent(
                id=f"sc{idx}",
                name=source.label,
                details=details,
                status=status,
                last_checked=latest.time if latest is not None else None,
                type=source.kind.value,
            )
        )
    return components


async def build_alerts(
    reader: TelemetryReader, time_range: ResolvedRange
) -> list[AlertOut]:
    return await reader.alerts(time_range.window)


async def build_solar_radiation(
    reader: TelemetryReader,
    now: datetime | None = None,
) -> list[SolarRadiationPoint]:
    """Inverter 1 output over the last three hours as radiation estimates."""
    window = TimeWindow.trailing(now or datetime.now(tz=UTC), SOLAR_RADIATION_WINDOW)
    readings = await reader.read(PowerSource.INVERTER1, window)
    return [
        SolarRadiationPoint(
            hour=r.time.strftime("%I:%M %p").lstrip("0"),
            radiation=round(r.kwt * RADIATION_PER_KW, CHART_DECIMALS),
            potential=round(r.kwt, CHART_DECIMALS),
        )
        for r in readings
    ]


async def latest_reading(reader: TelemetryReader, source: str) -> PowerReading | None:
    """Return the newest reading of a source named by the client.

    Raises:
        NotFoundError: If *source* is not a known power source.
    """
    return await reader.latest(resolve_source(source))


async def build_source_series(
    reader: TelemetryReader,
    source: str,
    time_range: ResolvedRange,
    granularity: str | None = None,
) -> SeriesResponse:
    """Aggregate buckets of one source over the window.

    Args:
        reader: Telemetry source.
        source: Source identifier from the request path.
        time_range: Resolved window.
        granularity: Bucket size; defaults to the range's chart granularity.

    Raises:
        NotFoundError: If *source* is not a known power source.
        InvalidArgumentError: If *granularity* is not a known granularity.
    """
    power_source = resolve_source(source)
    granularity = granularity or time_range.chart_granularity
    readings = await reader.read(power_source, time_range.window)
    buckets = aggregate(readings, granularity)

    logger.debug(
        "Series query: source=%s range=%s granularity=%s buckets=%d",
        power_source.value,
        time_range.token,
        granularity,
        len(buckets),
    )

    return SeriesResponse(
        source=power_source,
        granularity=granularity,
        time_range=time_range.token,
        series=[
            BucketOut(
                bucket=b.start,
                bucket_end=b.end,
                sample_count=b.sample_count,
                values=b.values,
            )
            for b in buckets
        ],
    )
