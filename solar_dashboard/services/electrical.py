"""
Per-phase electrical formulas and reading validation.

Single home for the relations between voltage, current, power factor and
power used throughout the service:

    kw   = v * a * pf / 1000
    kva  = v * a / 1000
    kvar = sqrt(kva^2 - kw^2)

``build_reading`` applies them to produce a complete PowerReading (used by the
synthetic telemetry generator), and ``check_reading`` verifies stored readings
against the same relations.

This module is pure: no I/O, no clock.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from solar_dashboard.core.sources import PowerSource
from solar_dashboard.models import PowerReading

SQRT3 = math.sqrt(3)

DEFAULT_TOLERANCE = 0.05
"""Absolute slack (kW / kVA / kVAr) allowed between totals and phase sums."""


@dataclass(frozen=True)
class PhasePower:
    """Real, apparent and reactive power of one phase."""

    kw: float
    kva: float
    kvar: float


def phase_power(v: float, a: float, pf: float) -> PhasePower:
    """Derive the power triangle of one phase from voltage, current and pf.

    Args:
        v: Phase-neutral voltage in volts.
        a: Phase current in amperes.
        pf: Power factor (0..1).

    Returns:
        PhasePower: kW, kVA and kVAr for the phase.
    """
    kva = v * a / 1000
    kw = kva * pf
    # Rounding can push kw a hair above kva; never take sqrt of a negative.
    kvar = math.sqrt(max(kva**2 - kw**2, 0.0))
    return PhasePower(kw=kw, kva=kva, kvar=kvar)


def line_voltage(va: float, vb: float) -> float:
    """Approximate the line-line voltage between two balanced phases."""
    return SQRT3 * (va + vb) / 2


def build_reading(
    *,
    source: PowerSource,
    time: datetime,
    voltages: tuple[float, float, float],
    currents: tuple[float, float, float],
    power_factors: tuple[float, float, float],
    hz: float,
    kwh_import: float,
    kwh_export: float,
    kvarh_import: float,
    kvarh_export: float,
) -> PowerReading:
    """Assemble a complete reading from per-phase measurements.

    Per-phase powers come from :func:`phase_power`; totals are phase sums,
    and ``pft`` is the arithmetic mean of the phase power factors.
    """
    v1, v2, v3 = voltages
    a1, a2, a3 = currents
    pf1, pf2, pf3 = power_factors
    p1, p2, p3 = (
        phase_power(v1, a1, pf1),
        phase_power(v2, a2, pf2),
        phase_power(v3, a3, pf3),
    )
    return PowerReading(
        source=source,
        time=time,
        v1=v1,
        v2=v2,
        v3=v3,
        v12=line_voltage(v1, v2),
        v23=line_voltage(v2, v3),
        v31=line_voltage(v3, v1),
        a1=a1,
        a2=a2,
        a3=a3,
        kva1=p1.kva,
        kva2=p2.kva,
        kva3=p3.kva,
        kvat=p1.kva + p2.kva + p3.kva,
        kvar1=p1.kvar,
        kvar2=p2.kvar,
        kvar3=p3.kvar,
        kvart=p1.kvar + p2.kvar + p3.kvar,
        kw1=p1.kw,
        kw2=p2.kw,
        kw3=p3.kw,
        kwt=p1.kw + p2.kw + p3.kw,
        pf1=pf1,
        pf2=pf2,
        pf3=pf3,
        pft=(pf1 + pf2 + pf3) / 3,
        hz=hz,
        kwh_import=kwh_import,
        kwh_export=kwh_export,
        kvarh_import=kvarh_import,
        kvarh_export=kvarh_export,
    )


def check_reading(
    reading: PowerReading,
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[str]:
    """Return the electrical invariants a reading violates.

    Checks that apparent power is at least real power on every phase and
    that the kW/kVA/kVAr totals equal the phase sums within *tolerance*.

    Args:
        reading: Reading to check.
        tolerance: Absolute slack for every comparison.

    Returns:
        list[str]: One message per violation; empty when the reading is
        consistent.
    """
    problems: list[str] = []

    for phase in ("1", "2", "3"):
        kw = getattr(reading, f"kw{phase}")
        kva = getattr(reading, f"kva{phase}")
        if kva + tolerance < kw:
            problems.append(f"kva{phase}={kva:.3f} < kw{phase}={kw:.3f}")

    for prefix in ("kw", "kva", "kvar"):
        total = getattr(reading, f"{prefix}t")
        phase_sum = sum(getattr(reading, f"{prefix}{p}") for p in ("1", "2", "3"))
        if abs(total - phase_sum) > tolerance:
            problems.append(
                f"{prefix}t={total:.3f} differs from phase sum {phase_sum:.3f}"
            )

    return problems
