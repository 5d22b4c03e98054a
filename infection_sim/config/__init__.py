"""Configuration layer: constants and typed config dataclasses."""

from infection_sim.config.constants import (
    DEFAULT_DT,
    FIELD_HEIGHT,
    FIELD_WIDTH,
    FLUSH_THRESHOLD,
    INFECT_DISTANCE,
    INFECT_TIME,
    INITIAL_POPULATION,
    MAX_SPEED,
    PERTURBATION_MAX_DELTA,
    SIMULATION_DURATION,
    STEPS_PER_SECOND,
    TARGET_POPULATION,
)
from infection_sim.config.types import (
    RunConfig,
    RunResult,
    Scenario,
    ScenarioParams,
    SimulatorConfig,
)

__all__ = [
    "DEFAULT_DT",
    "FIELD_HEIGHT",
    "FIELD_WIDTH",
    "FLUSH_THRESHOLD",
    "INFECT_DISTANCE",
    "INFECT_TIME",
    "INITIAL_POPULATION",
    "MAX_SPEED",
    "PERTURBATION_MAX_DELTA",
    "RunConfig",
    "RunResult",
    "SIMULATION_DURATION",
    "STEPS_PER_SECOND",
    "Scenario",
    "ScenarioParams",
    "SimulatorConfig",
    "TARGET_POPULATION",
]
