"""Typed snapshot record for one agent.

``PersonMemento`` is a flat, data-only projection of a ``Person``. The
``to_record``/``from_record`` pair maps it to the persisted key names
``id, posX, posY, velX, velY, immunity, health, symptom, state,
infectionRemainingSteps``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from infection_sim.domain.enums import AgentState, HealthState, Immunity, SymptomState

RECORD_KEYS: tuple[str, ...] = (
    "id",
    "posX",
    "posY",
    "velX",
    "velY",
    "immunity",
    "health",
    "symptom",
    "state",
    "infectionRemainingSteps",
)
"""Persisted field names, in file order."""


@dataclass(frozen=True)
class PersonMemento:
    """Immutable snapshot of a single agent at one point in time."""

    id: int
    pos_x: float
    pos_y: float
    vel_x: float
    vel_y: float
    immunity: Immunity
    health: HealthState
    symptom: SymptomState | None
    state: AgentState
    infection_remaining_steps: int

    def to_record(self) -> dict[str, object]:
        """Return a JSON-ready mapping using the persisted key names."""
        return {
            "id": self.id,
            "posX": self.pos_x,
            "posY": self.pos_y,
            "velX": self.vel_x,
            "velY": self.vel_y,
            "immunity": self.immunity.value,
            "health": self.health.value,
            "symptom": None if self.symptom is None else self.symptom.value,
            "state": self.state.value,
            "infectionRemainingSteps": self.infection_remaining_steps,
        }

    @classmethod
    def from_record(cls, record: dict[str, object]) -> PersonMemento:
        """Parse a persisted mapping; enums may be names or legacy ordinals."""
        missing = [key for key in RECORD_KEYS if key != "symptom" and key not in record]
        if missing:
            raise ValueError(f"snapshot record is missing fields: {', '.join(missing)}")
        raw_symptom = record.get("symptom")
        return cls(
            id=_as_int(record["id"], "id"),
            pos_x=_as_float(record["posX"], "posX"),
            pos_y=_as_float(record["posY"], "posY"),
            vel_x=_as_float(record["velX"], "velX"),
            vel_y=_as_float(record["velY"], "velY"),
            immunity=Immunity.parse(record["immunity"]),
            health=HealthState.parse(record["health"]),
            symptom=None if raw_symptom is None else SymptomState.parse(raw_symptom),
            state=AgentState.parse(record["state"]),
            infection_remaining_steps=_as_int(
                record["infectionRemainingSteps"], "infectionRemainingSteps"
            ),
        )


Snapshot = list[PersonMemento]
"""Ordered list of agent records capturing the whole population."""


def _as_int(raw: object, key: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float) and not math.isfinite(raw):
        raise ValueError(f"{key} must be finite, got {raw!r}")
    if isinstance(raw, float) and raw != int(raw):
        raise ValueError(f"{key} must be an integer value, got {raw!r}")
    return int(raw)


def _as_float(raw: object, key: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{key} must be a numeric value")
    try:
        value = float(raw)
    except OverflowError as exc:
        raise ValueError(f"{key} is out of range") from exc
    if not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got {raw!r}")
    return value
