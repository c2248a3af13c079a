"""
Registry of the metered power sources shown on the dashboard.

The installation has a fixed set of six meters: two on the grid connection,
two on generators, and two on inverters. Each source maps one-to-one onto a
database table of the same name.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from enum import Enum

from solar_dashboard.core.errors import NotFoundError


class SourceKind(str, Enum):
    """Category of a power source."""

    GRID = "grid"
    GENERATOR = "generator"
    INVERTER = "inverter"


class PowerSource(str, Enum):
    """Identifier of a metered power source (also its table name)."""

    GRID1 = "grid1"
    GRID2 = "grid2"
    GENERATOR1 = "generator1"
    GENERATOR2 = "generator2"
    INVERTER1 = "inverter1"
    INVERTER2 = "inverter2"

    @property
    def kind(self) -> SourceKind:
        """Return the category this source belongs to."""
        return SourceKind(self.value.rstrip("0123456789"))

    @property
    def label(self) -> str:
        """Return a display name such as ``Generator 1``."""
        return f"{self.kind.value.capitalize()} {self.value[-1]}"


GRID_SOURCES: tuple[PowerSource, ...] = (PowerSource.GRID1, PowerSource.GRID2)

GENERATION_SOURCES: tuple[PowerSource, ...] = (
    PowerSource.GENERATOR1,
    PowerSource.GENERATOR2,
    PowerSource.INVERTER1,
    PowerSource.INVERTER2,
)

GENERATOR_SOURCES: tuple[PowerSource, ...] = (
    PowerSource.GENERATOR1,
    PowerSource.GENERATOR2,
)

ALL_SOURCES: tuple[PowerSource, ...] = tuple(PowerSource)


def resolve_source(name: str | PowerSource) -> PowerSource:
    """Look up a power source by identifier.

    Args:
        name: Source identifier, e.g. ``"grid1"``.

    Returns:
        PowerSource: The matching source.

    Raises:
        NotFoundError: If no source has this identifier.
    """
    if isinstance(name, PowerSource):
        return name
    try:
        return PowerSource(name.strip().lower())
    except ValueError:
        raise NotFoundError(f"Unknown power source '{name}'.") from None
