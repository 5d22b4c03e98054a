"""Configuration dataclasses for simulator and scenario runs.

All frozen dataclasses that parameterise the engine and the run driver
live here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from infection_sim.config.constants import (
    FIELD_HEIGHT,
    FIELD_WIDTH,
    INFECT_DISTANCE,
    INFECT_TIME,
    INITIAL_POPULATION,
    MAX_SPEED,
    MIN_SPAWN_SPEED,
    PERTURBATION_MAX_DELTA,
    SIMULATION_DURATION,
    STEPS_PER_SECOND,
    TARGET_POPULATION,
)

__all__ = [
    "RunConfig",
    "RunResult",
    "Scenario",
    "ScenarioParams",
    "SimulatorConfig",
]

# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunResult:
    """Top-level result for one scenario run."""

    steps: int
    total: int
    remaining: int
    healthy: int
    infected: int
    immune: int
    exited: int
    snapshot_path: Path
    timeline_path: Path
    summary_path: Path
    trajectory_log_path: Path | None = None


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


def _check_probability(value: float, name: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0.0, 1.0]")


@dataclass(frozen=True)
class ScenarioParams:
    """Initial-population parameters for one scenario."""

    immunity_ratio: float
    infection_chance: float

    def __post_init__(self) -> None:
        _check_probability(self.immunity_ratio, "immunity_ratio")
        _check_probability(self.infection_chance, "infection_chance")


class Scenario(Enum):
    """Preset starting conditions offered to the driver."""

    NORMAL = "normal"
    POST_EPIDEMIC = "post_epidemic"

    @property
    def params(self) -> ScenarioParams:
        """Immunity ratio and initial infection chance for this preset."""
        if self is Scenario.POST_EPIDEMIC:
            return ScenarioParams(immunity_ratio=0.7, infection_chance=0.03)
        return ScenarioParams(immunity_ratio=0.0, infection_chance=0.1)


@dataclass(frozen=True)
class SimulatorConfig:
    """Field geometry and infection constants for one simulator."""

    width: float = FIELD_WIDTH
    height: float = FIELD_HEIGHT
    max_speed: float = MAX_SPEED
    infect_distance: float = INFECT_DISTANCE
    infect_time: float = INFECT_TIME
    target_population: int = TARGET_POPULATION

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("field dimensions must be > 0")
        if self.max_speed < MIN_SPAWN_SPEED:
            raise ValueError(f"max_speed must be >= {MIN_SPAWN_SPEED}")
        if self.infect_distance < 0:
            raise ValueError("infect_distance must be >= 0")
        if self.infect_time < 0:
            raise ValueError("infect_time must be >= 0")
        if self.target_population < 0:
            raise ValueError("target_population must be >= 0")


@dataclass(frozen=True)
class RunConfig:
    """Driver settings for a fixed-step scenario run."""

    scenario: Scenario = Scenario.NORMAL
    simulator: SimulatorConfig = SimulatorConfig()
    initial_population: int = INITIAL_POPULATION
    duration: float = SIMULATION_DURATION
    steps_per_second: int = STEPS_PER_SECOND
    perturb_velocity: bool = True
    perturbation_max_delta: float = PERTURBATION_MAX_DELTA
    seed: int = 0
    out_dir: Path = Path("data")
    write_trajectory_log: bool = False
    snapshot_name: str = "snapshot.json"
    resume_from: Path | None = None

    def __post_init__(self) -> None:
        if self.initial_population < 0:
            raise ValueError("initial_population must be >= 0")
        if self.duration <= 0:
            raise ValueError("duration must be > 0")
        if self.steps_per_second < 1:
            raise ValueError("steps_per_second must be >= 1")
        if self.perturbation_max_delta < 0:
            raise ValueError("perturbation_max_delta must be >= 0")
        if not self.snapshot_name or "/" in self.snapshot_name or "\\" in self.snapshot_name:
            raise ValueError("snapshot_name must be a plain file name")

    @property
    def dt(self) -> float:
        """Step length in seconds."""
        return 1.0 / self.steps_per_second

    @property
    def total_steps(self) -> int:
        """Number of fixed steps needed to cover ``duration``."""
        return int(round(self.duration * self.steps_per_second))
