"""
SQLAlchemy ORM models for the dashboard database.

Each of the six meters has its own table with identical columns (three-phase
voltage, current, power, power factor, frequency and energy counters). The
tables are written by an external ingestion process; this service only reads
them. ``alerts`` and ``forecast_days`` back the alert table and the energy
forecast widget.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import datetime

from sqlalchemy import DateTime, Double, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from solar_dashboard.core.sources import PowerSource


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all dashboard ORM models."""

    pass


class PowerReadingMixin:
    """Columns shared by every meter table.

    Attributes:
        id: Autoincrement row id.
        v1..v31: Phase and line voltages in volts.
        a1..a3: Phase currents in amperes.
        kva*, kvar*, kw*: Apparent, reactive and real power per phase and
            total.
        pf*: Power factor per phase and total.
        hz: Line frequency.
        kwh_import, kwh_export, kvarh_import, kvarh_export: Cumulative
            energy counters.
        time: Sample timestamp.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    v1: Mapped[float] = mapped_column(Double, nullable=False)
    v2: Mapped[float] = mapped_column(Double, nullable=False)
    v3: Mapped[float] = mapped_column(Double, nullable=False)
    v12: Mapped[float] = mapped_column(Double, nullable=False)
    v23: Mapped[float] = mapped_column(Double, nullable=False)
    v31: Mapped[float] = mapped_column(Double, nullable=False)
    a1: Mapped[float] = mapped_column(Double, nullable=False)
    a2: Mapped[float] = mapped_column(Double, nullable=False)
    a3: Mapped[float] = mapped_column(Double, nullable=False)
    kva1: Mapped[float] = mapped_column(Double, nullable=False)
    kva2: Mapped[float] = mapped_column(Double, nullable=False)
    kva3: Mapped[float] = mapped_column(Double, nullable=False)
    kvat: Mapped[float] = mapped_column(Double, nullable=False)
    kvar1: Mapped[float] = mapped_column(Double, nullable=False)
    kvar2: Mapped[float] = mapped_column(Double, nullable=False)
    kvar3: Mapped[float] = mapped_column(Double, nullable=False)
    kvart: Mapped[float] = mapped_column(Double, nullable=False)
    kw1: Mapped[float] = mapped_column(Double, nullable=False)
    kw2: Mapped[float] = mapped_column(Double, nullable=False)
    kw3: Mapped[float] = mapped_column(Double, nullable=False)
    kwt: Mapped[float] = mapped_column(Double, nullable=False)
    pf1: Mapped[float] = mapped_column(Double, nullable=False)
    pf2: Mapped[float] = mapped_column(Double, nullable=False)
    pf3: Mapped[float] = mapped_column(Double, nullable=False)
    pft: Mapped[float] = mapped_column(Double, nullable=False)
    hz: Mapped[float] = mapped_column(Double, nullable=False)
    kwh_import: Mapped[float] = mapped_column(Double, nullable=False)
    kwh_export: Mapped[float] = mapped_column(Double, nullable=False)
    kvarh_import: Mapped[float] = mapped_column(Double, nullable=False)
    kvarh_export: Mapped[float] = mapped_column(Double, nullable=False)
    time: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        """Return string representation of the reading row."""
        return (
            f"{type(self).__name__}(id={self.id!r}, "
            f"time={self.time!r}, kwt={self.kwt!r})"
        )


class Grid1Reading(PowerReadingMixin, Base):
    __tablename__ = "grid1"


class Grid2Reading(PowerReadingMixin, Base):
    __tablename__ = "grid2"


class Generator1Reading(PowerReadingMixin, Base):
    __tablename__ = "generator1"


class Generator2Reading(PowerReadingMixin, Base):
    __tablename__ = "generator2"


class Inverter1Reading(PowerReadingMixin, Base):
    __tablename__ = "inverter1"


class Inverter2Reading(PowerReadingMixin, Base):
    __tablename__ = "inverter2"


READING_TABLES: dict[PowerSource, type[PowerReadingMixin]] = {
    PowerSource.GRID1: Grid1Reading,
    PowerSource.GRID2: Grid2Reading,
    PowerSource.GENERATOR1: Generator1Reading,
    PowerSource.GENERATOR2: Generator2Reading,
    PowerSource.INVERTER1: Inverter1Reading,
    PowerSource.INVERTER2: Inverter2Reading,
}
"""Maps each power source to the ORM class of its table."""


class Alert(Base):
    """System alert row shown in the dashboard alert table.

    Attributes:
        id: Autoincrement row id.
        status: Severity label, e.g. ``Warning``.
        description: Free-text description.
        component: Affected component name.
        time: Display time string as written by the producer.
        timestamp: When the alert was raised.
    """

    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    component: Mapped[str] = mapped_column(String(100), nullable=False)
    time: Mapped[str] = mapped_column(String(50), nullable=False)
    timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class ForecastDay(Base):
    """Per-day production forecast row."""

    __tablename__ = "forecast_days"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(50), nullable=False)
    weather: Mapped[str] = mapped_column(String(50), nullable=False)
    forecast: Mapped[str] = mapped_column(String(255), nullable=False)
    comparison: Mapped[float] = mapped_column(Double, nullable=False)
