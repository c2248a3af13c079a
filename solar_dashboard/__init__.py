"""
Solar power monitoring dashboard API.

Read-only REST layer that turns raw three-phase electrical telemetry into
time-bucketed aggregates, KPIs, and energy-flow distributions.
"""

__version__ = "0.1.0"
