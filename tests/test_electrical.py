"""
Tests for per-phase electrical formulas and reading validation.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import math
from datetime import UTC, datetime

import pytest
from conftest import make_reading

from solar_dashboard.core.sources import PowerSource
from solar_dashboard.services.electrical import (
    build_reading,
    check_reading,
    line_voltage,
    phase_power,
)

TS = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def _reading(**kwargs):
    params = {
        "source": PowerSource.GENERATOR1,
        "time": TS,
        "voltages": (230.0, 231.0, 229.0),
        "currents": (40.0, 42.0, 38.0),
        "power_factors": (0.9, 0.85, 0.95),
        "hz": 50.0,
        "kwh_import": 10.0,
        "kwh_export": 20.0,
        "kvarh_import": 3.0,
        "kvarh_export": 6.0,
    }
    params.update(kwargs)
    return build_reading(**params)


class TestPhasePower:
    def test_power_triangle(self) -> None:
        p = phase_power(230.0, 10.0, 0.8)
        assert p.kva == pytest.approx(2.3)
        assert p.kw == pytest.approx(1.84)
        assert p.kvar == pytest.approx(math.sqrt(2.3**2 - 1.84**2))

    def test_unity_power_factor_has_no_reactive_power(self) -> None:
        assert phase_power(230.0, 10.0, 1.0).kvar == 0.0

    def test_line_voltage(self) -> None:
        assert line_voltage(230.0, 230.0) == pytest.approx(230.0 * math.sqrt(3))


class TestBuildReading:
    def test_totals_are_phase_sums(self) -> None:
        reading = _reading()
        assert reading.kwt == pytest.approx(reading.kw1 + reading.kw2 + reading.kw3)
        assert reading.kvat == pytest.approx(
            reading.kva1 + reading.kva2 + reading.kva3
        )
        assert reading.kvart == pytest.approx(
            reading.kvar1 + reading.kvar2 + reading.kvar3
        )

    def test_apparent_power_bounds_real_power(self) -> None:
        reading = _reading()
        for phase in ("1", "2", "3"):
            assert getattr(reading, f"kva{phase}") >= getattr(reading, f"kw{phase}")

    def test_total_power_factor_is_mean(self) -> None:
        assert _reading().pft == pytest.approx(0.9)

    def test_built_reading_passes_checks(self) -> None:
        assert check_reading(_reading()) == []


class TestCheckReading:
    def test_detects_kva_below_kw(self) -> None:
        reading = make_reading(kw1=5.0, kva1=2.0, kwt=5.0, kvat=2.0)
        problems = check_reading(reading)
        assert any("kva1" in p for p in problems)

    def test_detects_total_mismatch(self) -> None:
        phases = {f"{p}{n}": 1.0 for p in ("kw", "kva") for n in ("1", "2", "3")}
        reading = make_reading(kvat=3.0, kwt=9.0, **phases)
        problems = check_reading(reading)
        assert problems == ["kwt=9.000 differs from phase sum 3.000"]

    def test_tolerance(self) -> None:
        reading = make_reading(kw1=1.0, kva1=1.0, kwt=1.02, kvat=1.0)
        assert check_reading(reading) == []
        assert check_reading(reading, tolerance=0.001) != []
