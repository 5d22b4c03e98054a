"""Simulation engine and its Parquet persistence helpers."""

from infection_sim.simulation.engine import PairKey, Simulator, pair_key
from infection_sim.simulation.persistence import (
    append_trajectory_rows,
    flush_trajectory_columns,
    new_trajectory_columns,
    write_census_timeline,
)

__all__ = [
    "PairKey",
    "Simulator",
    "append_trajectory_rows",
    "flush_trajectory_columns",
    "new_trajectory_columns",
    "pair_key",
    "write_census_timeline",
]
