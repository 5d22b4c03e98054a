"""Domain layer: vectors, agent state machine, and typed snapshots."""

from infection_sim.domain.enums import AgentState, HealthState, Immunity, SymptomState
from infection_sim.domain.person import Person
from infection_sim.domain.snapshot import RECORD_KEYS, PersonMemento, Snapshot
from infection_sim.domain.vector import Vector2D

__all__ = [
    "AgentState",
    "HealthState",
    "Immunity",
    "Person",
    "PersonMemento",
    "RECORD_KEYS",
    "Snapshot",
    "SymptomState",
    "Vector2D",
]
