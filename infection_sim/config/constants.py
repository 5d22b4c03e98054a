"""Centralized domain constants for infection simulations.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

FIELD_WIDTH = 30.0
"""Default field width in meters."""

FIELD_HEIGHT = 30.0
"""Default field height in meters."""

MAX_SPEED = 2.5
"""Default upper bound on agent speed (m/s)."""

MIN_SPAWN_SPEED = 0.2
"""Lower bound of the uniform speed draw for newly spawned agents."""

STEPS_PER_SECOND = 25
"""Fixed tick rate shared by the driver and the snapshot step-count encoding."""

DEFAULT_DT = 1.0 / STEPS_PER_SECOND
"""Default step length in seconds."""

INFECT_DISTANCE = 2.0
"""Euclidean radius within which two agents accrue contact time."""

INFECT_TIME = 3.0
"""Accumulated contact seconds required before transmission is attempted."""

TARGET_POPULATION = 50
"""Floor on the number of non-exited agents maintained after every step."""

REPLENISH_INFECTION_CHANCE = 0.1
"""Infection chance for agents spawned by population maintenance."""

INITIAL_POPULATION = 50
"""Default number of agents seeded at the start of a run."""

INFECTION_DURATION_MIN = 20.0
"""Lower bound of the per-agent infection duration draw (seconds)."""

INFECTION_DURATION_SPAN = 10.0
"""Width of the per-agent infection duration draw (seconds)."""

SYMPTOMATIC_TRANSMISSION = 1.0
"""Transmission probability from a symptomatic source."""

ASYMPTOMATIC_TRANSMISSION = 0.5
"""Transmission probability from an asymptomatic source."""

REFLECT_PROBABILITY = 0.5
"""Probability that a boundary hit reflects the agent instead of exiting it."""

PERTURBATION_MAX_DELTA = 0.2
"""Default per-component velocity perturbation applied by the run driver."""

SIMULATION_DURATION = 60.0
"""Default simulated run length in seconds."""

FLUSH_THRESHOLD = 8_192
"""Flush trajectory log rows to Parquet once this in-memory row count is reached."""
