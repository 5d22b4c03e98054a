"""Core simulation engine: spawning, stepping, boundaries, and transmission.

Step order is binding: kinematics, then boundary handling, then population
maintenance, then infection resolution. Agents that exit in a step cannot
transmit or receive in that step, and replacements spawned in a step start
accruing contact time immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from random import Random

from infection_sim.config.constants import (
    DEFAULT_DT,
    INFECT_DISTANCE,
    INFECT_TIME,
    MIN_SPAWN_SPEED,
    REFLECT_PROBABILITY,
    REPLENISH_INFECTION_CHANCE,
    TARGET_POPULATION,
)
from infection_sim.config.types import SimulatorConfig
from infection_sim.domain.person import Person
from infection_sim.domain.snapshot import PersonMemento, Snapshot
from infection_sim.domain.vector import Vector2D

logger = logging.getLogger(__name__)

PairKey = tuple[int, int]
"""Order-independent agent pair identity: (min id, max id)."""


def pair_key(a_id: int, b_id: int) -> PairKey:
    return (a_id, b_id) if a_id <= b_id else (b_id, a_id)


def _check_probability(value: float, name: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0.0, 1.0]")


class Simulator:
    """Bounded 2D field of mobile agents with proximity-based transmission."""

    def __init__(
        self,
        width: float,
        height: float,
        max_speed: float,
        *,
        rng: Random | None = None,
        infect_distance: float = INFECT_DISTANCE,
        infect_time: float = INFECT_TIME,
        target_population: int = TARGET_POPULATION,
    ) -> None:
        # Shared validation with the typed config.
        SimulatorConfig(
            width=width,
            height=height,
            max_speed=max_speed,
            infect_distance=infect_distance,
            infect_time=infect_time,
            target_population=target_population,
        )
        self.width = width
        self.height = height
        self.max_speed = max_speed
        self.infect_distance = infect_distance
        self.infect_time = infect_time
        self.target_population = target_population
        self.rng = rng if rng is not None else Random()

        self._agents: list[Person] = []
        self._next_id = 1
        self._proximity_timers: dict[PairKey, float] = {}

    @classmethod
    def from_config(cls, config: SimulatorConfig, rng: Random | None = None) -> Simulator:
        return cls(
            config.width,
            config.height,
            config.max_speed,
            rng=rng,
            infect_distance=config.infect_distance,
            infect_time=config.infect_time,
            target_population=config.target_population,
        )

    # -- read-only views ------------------------------------------------------

    @property
    def agents(self) -> tuple[Person, ...]:
        """All agents ever created, including exited ones, in creation order."""
        return tuple(self._agents)

    @property
    def live_agents(self) -> list[Person]:
        return [p for p in self._agents if not p.is_exited]

    @property
    def alive_count(self) -> int:
        return sum(1 for p in self._agents if not p.is_exited)

    @property
    def next_id(self) -> int:
        return self._next_id

    def contact_time(self, a_id: int, b_id: int) -> float:
        """Accumulated contact seconds for a pair, 0.0 when not in range."""
        return self._proximity_timers.get(pair_key(a_id, b_id), 0.0)

    @property
    def proximity_timers(self) -> dict[PairKey, float]:
        return dict(self._proximity_timers)

    # -- population -----------------------------------------------------------

    def seed_initial_population(
        self, count: int, immunity_ratio: float, infection_chance: float
    ) -> None:
        """Spawn *count* agents, each immune with probability *immunity_ratio*."""
        if count < 0:
            raise ValueError("count must be >= 0")
        _check_probability(immunity_ratio, "immunity_ratio")
        _check_probability(infection_chance, "infection_chance")
        for _ in range(count):
            immune = self.rng.random() < immunity_ratio
            self.spawn_person(immune, infection_chance)

    def spawn_person(self, immune: bool, infection_chance: float) -> Person:
        """Create an agent on a random edge, heading for the field center."""
        rng = self.rng
        edge = rng.randrange(4)
        if edge == 0:
            x, y = 0.0, rng.random() * self.height
        elif edge == 1:
            x, y = self.width, rng.random() * self.height
        elif edge == 2:
            x, y = rng.random() * self.width, 0.0
        else:
            x, y = rng.random() * self.width, self.height

        cx = self.width / 2.0
        cy = self.height / 2.0
        angle = (Vector2D(cx, cy) - Vector2D(x, y)).angle()
        speed = MIN_SPAWN_SPEED + rng.random() * (self.max_speed - MIN_SPAWN_SPEED)

        infected = not immune and rng.random() < infection_chance

        person = Person(
            self._next_id,
            Vector2D(x, y),
            Vector2D.from_polar(angle, speed),
            rng,
            immune=immune,
            infected=infected,
        )
        self._next_id += 1
        self._agents.append(person)
        logger.debug("spawned %r", person)
        return person

    def maintain_population(self) -> None:
        """Top up live agents to the target population; never removes any."""
        alive = self.alive_count
        while alive < self.target_population:
            self.spawn_person(immune=False, infection_chance=REPLENISH_INFECTION_CHANCE)
            alive += 1

    # -- stepping -------------------------------------------------------------

    def step(self, dt: float = DEFAULT_DT) -> None:
        """Advance the simulation by *dt* seconds."""
        if dt <= 0:
            raise ValueError("dt must be > 0")

        agents = list(self._agents)
        for person in agents:
            if not person.is_exited:
                person.update(dt)
        for person in agents:
            self._handle_borders(person)

        self.maintain_population()
        self._handle_infections(dt)

    def _handle_borders(self, person: Person) -> None:
        """Reflect off, or exit through, a violated field edge."""
        if person.is_exited:
            return

        x, y = person.position.components()
        x_hit = x <= 0 or x >= self.width
        y_hit = y <= 0 or y >= self.height
        if not (x_hit or y_hit):
            return

        if self.rng.random() < REFLECT_PROBABILITY:
            vx, vy = person.velocity.x, person.velocity.y
            if x_hit:
                vx = -vx
            if y_hit:
                vy = -vy
            person.set_velocity(Vector2D(vx, vy))
        else:
            person.mark_exited()
            logger.debug("agent %d exited at (%.2f, %.2f)", person.person_id, x, y)

    def _handle_infections(self, dt: float) -> None:
        """Accrue pairwise contact time and attempt transmission past the threshold."""
        agents = self._agents
        timers = self._proximity_timers
        self._drop_exited_contacts()
        n = len(agents)
        for i in range(n):
            a = agents[i]
            if a.is_exited:
                continue
            for j in range(i + 1, n):
                b = agents[j]
                if b.is_exited:
                    continue

                key = pair_key(a.person_id, b.person_id)
                if a.position.distance_to(b.position) <= self.infect_distance:
                    timers[key] = timers.get(key, 0.0) + dt
                    if timers[key] >= self.infect_time:
                        if a.is_infected and b.infect_from(a, self.rng):
                            logger.debug("agent %d infected by %d", b.person_id, a.person_id)
                        if b.is_infected and a.infect_from(b, self.rng):
                            logger.debug("agent %d infected by %d", a.person_id, b.person_id)
                else:
                    timers.pop(key, None)

    def _drop_exited_contacts(self) -> None:
        """Forget every contact timer that involves an exited agent."""
        live_ids = {p.person_id for p in self._agents if not p.is_exited}
        stale = [
            key
            for key in self._proximity_timers
            if key[0] not in live_ids or key[1] not in live_ids
        ]
        for key in stale:
            del self._proximity_timers[key]

    # -- snapshot -------------------------------------------------------------

    def create_snapshot(self) -> Snapshot:
        """One record per agent, in creation order."""
        return [person.create_memento() for person in self._agents]

    def restore_snapshot(self, mementos: Iterable[PersonMemento]) -> None:
        """Replace the population with restored agents and resume the id counter."""
        restored = [Person.from_memento(m, self.rng) for m in mementos]
        ids = [p.person_id for p in restored]
        if len(set(ids)) != len(ids):
            raise ValueError("snapshot contains duplicate agent ids")
        restored.sort(key=lambda p: p.person_id)
        self._agents = restored
        self._proximity_timers.clear()
        self._next_id = max(ids, default=0) + 1
