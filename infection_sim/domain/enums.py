"""Agent state enumerations.

Values are the display names written to snapshot files; declaration order is the
integer encoding used by legacy snapshot files.
"""

from __future__ import annotations

from enum import Enum


class _NamedState(Enum):
    @classmethod
    def parse(cls, raw: object) -> _NamedState:
        """Parse an enum from its name, value, or legacy ordinal."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, bool):
            raise ValueError(f"{cls.__name__} cannot be parsed from {raw!r}")
        if isinstance(raw, int):
            members = list(cls)
            if 0 <= raw < len(members):
                return members[raw]
        if isinstance(raw, str):
            for member in cls:
                if raw in (member.value, member.name) or raw.lower() == member.value.lower():
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"{cls.__name__} must be one of {valid}, got {raw!r}")


class Immunity(_NamedState):
    IMMUNE = "Immune"
    SUSCEPTIBLE = "Susceptible"


class HealthState(_NamedState):
    HEALTHY = "Healthy"
    INFECTED = "Infected"


class SymptomState(_NamedState):
    ASYMPTOMATIC = "Asymptomatic"
    SYMPTOMATIC = "Symptomatic"


class AgentState(_NamedState):
    MOVING = "Moving"
    EXITED = "Exited"
