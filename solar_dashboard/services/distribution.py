"""
Energy-flow distribution for the power-source pie chart.

The chart always receives exactly three entries, in a fixed order, even when
there is no data; a zero total yields three zero entries.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

from solar_dashboard.models import DistributionEntry

GRID_IMPORT = "Grid Import"
GENERATION = "Solar/Inverter"
GRID_EXPORT = "Grid Export"


def compute_distribution(
    grid_import: float,
    generation: float,
    grid_export: float,
    decimals: int = 1,
) -> list[DistributionEntry]:
    """Build the three distribution entries and their percentage shares.

    Args:
        grid_import: Energy drawn from the grid over the window.
        generation: Energy produced by generators and inverters.
        grid_export: Energy sent to the grid.
        decimals: Rounding applied to shares (values are not rounded).

    Returns:
        list[DistributionEntry]: Grid Import, Solar/Inverter, Grid Export.
    """
    values = {
        GRID_IMPORT: max(grid_import, 0.0),
        GENERATION: max(generation, 0.0),
        GRID_EXPORT: max(grid_export, 0.0),
    }
    total = sum(values.values())
    return [
        DistributionEntry(
            name=name,
            value=value,
            share=round(value / total * 100, decimals) if total > 0 else 0.0,
        )
        for name, value in values.items()
    ]
