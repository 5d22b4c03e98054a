"""Population statistics over snapshots and live agent lists.

Two reductions are offered and they deliberately count differently:

- ``calculate_from_snapshot`` counts infected and immune agents whether or
  not they have exited, and counts as healthy only susceptible, non-exited
  agents.
- ``census`` skips exited agents for every health category and reports the
  number of remaining (non-exited) agents, matching the per-second status
  line printed by the run driver.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass

from infection_sim.domain.enums import AgentState, HealthState, Immunity
from infection_sim.domain.person import Person
from infection_sim.domain.snapshot import PersonMemento


@dataclass(frozen=True)
class SimulationStats:
    """Category counts derived from one snapshot."""

    total: int
    healthy: int
    infected: int
    immune: int
    exited: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class PopulationCensus:
    """Counts over live agents, plus the exited and all-time totals."""

    remaining: int
    total: int
    healthy: int
    infected: int
    immune: int
    exited: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    def format_line(self, t_seconds: int) -> str:
        return (
            f"t={t_seconds}s: remaining={self.remaining} total={self.total} "
            f"healthy={self.healthy} infected={self.infected} "
            f"immune={self.immune} exited={self.exited}"
        )


def calculate_from_snapshot(snapshot: Iterable[PersonMemento]) -> SimulationStats:
    records = list(snapshot)
    return SimulationStats(
        total=len(records),
        healthy=sum(
            1
            for m in records
            if m.health is HealthState.HEALTHY
            and m.immunity is Immunity.SUSCEPTIBLE
            and m.state is not AgentState.EXITED
        ),
        infected=sum(1 for m in records if m.health is HealthState.INFECTED),
        immune=sum(1 for m in records if m.immunity is Immunity.IMMUNE),
        exited=sum(1 for m in records if m.state is AgentState.EXITED),
    )


def census(agents: Iterable[Person]) -> PopulationCensus:
    total = 0
    healthy = infected = immune = exited = 0
    for person in agents:
        total += 1
        if person.is_exited:
            exited += 1
            continue
        if person.is_immune:
            immune += 1
        if person.is_infected:
            infected += 1
        elif not person.is_immune:
            healthy += 1
    return PopulationCensus(
        remaining=total - exited,
        total=total,
        healthy=healthy,
        infected=infected,
        immune=immune,
        exited=exited,
    )
