"""
Derived metrics: percent change, net energy balance, power factor, efficiency.

All functions are pure. Percent change against a zero baseline is defined as
+100 when the current value is positive and 0 otherwise, so a period that
starts producing from nothing reads as growth instead of dividing by zero.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

from dataclasses import dataclass
from statistics import fmean

NET_POSITIVE = "Net Positive"
NET_NEGATIVE = "Net Negative"


def percent_change(current: float, baseline: float, decimals: int = 1) -> float:
    """Return ``(current - baseline) / baseline * 100`` rounded to *decimals*.

    Args:
        current: Value for the period of interest.
        baseline: Value for the comparison period.
        decimals: Rounding precision.

    Returns:
        float: The percent change. With a zero baseline: ``100.0`` when
        *current* is positive, else ``0.0``.
    """
    if baseline == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - baseline) / baseline * 100, decimals)


@dataclass(frozen=True)
class NetBalance:
    """Export minus import over a window, with its sign label."""

    value: float
    label: str


def net_energy_balance(import_total: float, export_total: float) -> NetBalance:
    """Return ``export - import`` labelled Net Positive/Net Negative.

    A zero balance counts as Net Positive.
    """
    value = export_total - import_total
    return NetBalance(value=value, label=NET_POSITIVE if value >= 0 else NET_NEGATIVE)


def power_factor_total(pf1: float, pf2: float, pf3: float) -> float:
    """Combine per-phase power factors by arithmetic mean.

    This is the dashboard's convention, not the vector combination
    ``sum(kw) / sum(kva)``.
    """
    return fmean((pf1, pf2, pf3))


def efficiency(output: float, rated_capacity: float) -> float:
    """Return output as a percentage of rated capacity, clamped to [0, 100].

    A non-positive capacity yields 0.
    """
    if rated_capacity <= 0:
        return 0.0
    return min(max(output / rated_capacity * 100, 0.0), 100.0)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_quantity(value: float, unit: str, decimals: int = 1) -> str:
    """Format a number with its unit, e.g. ``"8.4 kW"``."""
    return f"{value:.{decimals}f} {unit}"
