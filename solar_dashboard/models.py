"""
Pydantic models for telemetry readings and dashboard payloads.

``PowerReading`` is one raw three-phase sample from a meter. The remaining
models are the JSON shapes served to the dashboard; field aliases keep the
camelCase keys the frontend charts bind to.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from solar_dashboard.core.sources import PowerSource

# ---------------------------------------------------------------------------
# Raw telemetry
# ---------------------------------------------------------------------------

READING_FIELDS: tuple[str, ...] = (
    "v1", "v2", "v3", "v12", "v23", "v31",
    "a1", "a2", "a3",
    "kva1", "kva2", "kva3", "kvat",
    "kvar1", "kvar2", "kvar3", "kvart",
    "kw1", "kw2", "kw3", "kwt",
    "pf1", "pf2", "pf3", "pft",
    "hz",
    "kwh_import", "kwh_export", "kvarh_import", "kvarh_export",
)  # fmt: skip
"""Numeric columns of a reading, in table order."""


class PowerReading(BaseModel):
    """A single raw sample from a three-phase meter.

    Attributes:
        source: Meter the sample belongs to.
        time: Sample timestamp (UTC).
        v1, v2, v3: Phase-neutral voltages in volts.
        v12, v23, v31: Line-line voltages in volts.
        a1, a2, a3: Phase currents in amperes.
        kva1..kvat: Apparent power per phase and total in kVA.
        kvar1..kvart: Reactive power per phase and total in kVAr.
        kw1..kwt: Real power per phase and total in kW.
        pf1..pft: Power factor per phase and total.
        hz: Line frequency in hertz.
        kwh_import, kwh_export: Cumulative active energy counters in kWh.
        kvarh_import, kvarh_export: Cumulative reactive energy counters.
    """

    model_config = ConfigDict(frozen=True)

    source: PowerSource
    time: datetime
    v1: float
    v2: float
    v3: float
    v12: float
    v23: float
    v31: float
    a1: float
    a2: float
    a3: float
    kva1: float
    kva2: float
    kva3: float
    kvat: float
    kvar1: float
    kvar2: float
    kvar3: float
    kvart: float
    kw1: float
    kw2: float
    kw3: float
    kwt: float
    pf1: float
    pf2: float
    pf3: float
    pft: float
    hz: float
    kwh_import: float
    kwh_export: float
    kvarh_import: float
    kvarh_export: float


# ---------------------------------------------------------------------------
# KPIs: tagged union on ``type``
# ---------------------------------------------------------------------------


class _KpiBase(BaseModel):
    id: str
    title: str
    value: str
    change: float


class PowerKpi(_KpiBase):
    type: Literal["power"] = "power"


class EnergyKpi(_KpiBase):
    type: Literal["energy"] = "energy"


class GridKpi(_KpiBase):
    type: Literal["grid"] = "grid"


class Co2Kpi(_KpiBase):
    type: Literal["co2"] = "co2"


Kpi = Annotated[PowerKpi | EnergyKpi | GridKpi | Co2Kpi, Field(discriminator="type")]


# ---------------------------------------------------------------------------
# Energy flow
# ---------------------------------------------------------------------------


class DistributionEntry(BaseModel):
    """One category's share of energy flow over a window.

    Attributes:
        name: ``Grid Import``, ``Solar/Inverter`` or ``Grid Export``.
        value: Energy attributed to the category.
        share: Percentage of the three-way total (0 when the total is 0).
    """

    name: str
    value: float
    share: float


class EnergyChartPoint(BaseModel):
    time: datetime
    production: float
    consumption: float
    grid: float


class HistoryPoint(BaseModel):
    """Production/consumption totals for one history period."""

    model_config = ConfigDict(populate_by_name=True)

    production: float
    consumption: float
    grid_export: float = Field(alias="gridExport")


class DailyHistoryPoint(HistoryPoint):
    date: str


class MonthlyHistoryPoint(HistoryPoint):
    month: str


class YearlyHistoryPoint(HistoryPoint):
    year: str


class ForecastDayOut(BaseModel):
    date: str
    weather: str
    forecast: str
    comparison: float


class EnergyForecast(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    days: list[ForecastDayOut]
    weekly_total: str = Field(alias="weeklyTotal")
    weekly_change: float = Field(alias="weeklyChange")


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


class GridChartPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time: datetime
    import_kwh: float = Field(alias="import")
    export_kwh: float = Field(alias="export")


class GridStatus(BaseModel):
    """Grid connection summary for the selected window."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["Connected", "Disconnected"]
    last_checked: datetime | None = Field(alias="lastChecked")
    import_kwh: str = Field(alias="import")
    import_change: float = Field(alias="importChange")
    export_kwh: str = Field(alias="export")
    export_change: float = Field(alias="exportChange")
    net_balance: str = Field(alias="netBalance")
    net_balance_label: str = Field(alias="netBalanceLabel")
    voltage: str
    frequency: str
    chart_data: list[GridChartPoint] = Field(alias="chartData")


class PhaseSeriesPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time: datetime
    phase_a: float = Field(alias="phaseA")
    phase_b: float = Field(alias="phaseB")
    phase_c: float = Field(alias="phaseC")


class PowerFactorPoint(PhaseSeriesPoint):
    total: float


class FrequencyPoint(BaseModel):
    time: datetime
    frequency: float


# ---------------------------------------------------------------------------
# Generators and system components
# ---------------------------------------------------------------------------


class GeneratorGroup(BaseModel):
    id: str
    name: str
    output: str
    efficiency: float


class GeneratorPerformance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    groups: list[GeneratorGroup]
    total_output: str = Field(alias="totalOutput")


class GeneratorOutputPoint(BaseModel):
    time: datetime
    output: float


class SystemComponent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    details: str
    status: Literal["Online", "Offline", "No Data"]
    last_checked: datetime | None = Field(alias="lastChecked")
    type: str


class SolarRadiationPoint(BaseModel):
    hour: str
    radiation: float
    potential: float


class AlertOut(BaseModel):
    id: int | str
    status: str
    description: str
    component: str
    time: str
    timestamp: datetime | None = None


class BucketOut(BaseModel):
    """Single time-bucketed aggregation result for one source.

    Attributes:
        bucket: Start timestamp of the bucket (UTC).
        bucket_end: Start of the next bucket (exclusive end).
        sample_count: Number of raw readings in the bucket.
        values: Aggregated value per reading field.
    """

    bucket: datetime
    bucket_end: datetime
    sample_count: int
    values: dict[str, float]


class SeriesResponse(BaseModel):
    source: PowerSource
    granularity: str
    time_range: str
    series: list[BucketOut]
