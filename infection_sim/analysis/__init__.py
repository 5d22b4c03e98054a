"""Analysis layer: population statistics."""

from infection_sim.analysis.stats import (
    PopulationCensus,
    SimulationStats,
    calculate_from_snapshot,
    census,
)

__all__ = [
    "PopulationCensus",
    "SimulationStats",
    "calculate_from_snapshot",
    "census",
]
