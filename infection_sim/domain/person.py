"""Per-agent state machine: kinematics, infection progress, and exit.

Immunity is terminal for disease purposes: an immune agent is always healthy
and ``infect_from`` never converts it. An exited agent is frozen; only
``from_memento`` can produce an exited agent in another configuration.
"""

from __future__ import annotations

from random import Random

from infection_sim.config.constants import (
    ASYMPTOMATIC_TRANSMISSION,
    INFECTION_DURATION_MIN,
    INFECTION_DURATION_SPAN,
    STEPS_PER_SECOND,
    SYMPTOMATIC_TRANSMISSION,
)
from infection_sim.domain.enums import AgentState, HealthState, Immunity, SymptomState
from infection_sim.domain.snapshot import PersonMemento
from infection_sim.domain.vector import Vector2D


def _draw_symptoms(rng: Random) -> SymptomState:
    return SymptomState.ASYMPTOMATIC if rng.random() < 0.5 else SymptomState.SYMPTOMATIC


class Person:
    """A single mobile agent."""

    def __init__(
        self,
        person_id: int,
        position: Vector2D,
        velocity: Vector2D,
        rng: Random,
        immune: bool = False,
        infected: bool = False,
    ) -> None:
        self.person_id = person_id
        self.position = position
        self.velocity = velocity
        self.health = HealthState.HEALTHY
        self.immunity = Immunity.SUSCEPTIBLE
        self.symptoms = SymptomState.ASYMPTOMATIC
        self.state = AgentState.MOVING
        self.infection_timer = 0.0

        if immune:
            self.immunity = Immunity.IMMUNE
        elif infected:
            self.health = HealthState.INFECTED
            self.symptoms = _draw_symptoms(rng)

        self.infection_duration = INFECTION_DURATION_MIN + rng.random() * INFECTION_DURATION_SPAN

    def __repr__(self) -> str:
        return (
            f"Person(id={self.person_id}, pos={self.position}, "
            f"{self.health.value}/{self.immunity.value}/{self.state.value})"
        )

    @property
    def is_infected(self) -> bool:
        return self.health is HealthState.INFECTED

    @property
    def is_immune(self) -> bool:
        return self.immunity is Immunity.IMMUNE

    @property
    def is_exited(self) -> bool:
        return self.state is AgentState.EXITED

    def update(self, dt: float) -> None:
        """Integrate position (explicit Euler) and advance infection progress."""
        if self.is_exited:
            return

        self.position = self.position + self.velocity * dt

        if self.is_infected:
            self.infection_timer += dt
            if self.infection_timer >= self.infection_duration:
                self.health = HealthState.HEALTHY
                self.immunity = Immunity.IMMUNE
                self.symptoms = SymptomState.ASYMPTOMATIC

    def set_velocity(self, velocity: Vector2D) -> None:
        if self.is_exited:
            return
        self.velocity = velocity

    def apply_random_velocity_perturbation(
        self, max_speed: float, max_delta: float, rng: Random
    ) -> None:
        """Jitter each velocity component by U(-max_delta, max_delta), clamped to max_speed."""
        if self.is_exited:
            return
        velocity = Vector2D(
            self.velocity.x + rng.uniform(-max_delta, max_delta),
            self.velocity.y + rng.uniform(-max_delta, max_delta),
        )
        if velocity.length() > max_speed:
            velocity = velocity.normalized() * max_speed
        self.velocity = velocity

    def mark_exited(self) -> None:
        self.state = AgentState.EXITED

    def infect_from(self, other: Person, rng: Random) -> bool:
        """Attempt transmission from *other*; return True if this agent converted."""
        if self.is_immune or self.is_infected or self.is_exited:
            return False

        if other.symptoms is SymptomState.SYMPTOMATIC:
            chance = SYMPTOMATIC_TRANSMISSION
        else:
            chance = ASYMPTOMATIC_TRANSMISSION

        if rng.random() < chance:
            self.health = HealthState.INFECTED
            self.symptoms = _draw_symptoms(rng)
            self.infection_timer = 0.0
            return True
        return False

    # -- snapshot / restore -------------------------------------------------

    def create_memento(self) -> PersonMemento:
        return PersonMemento(
            id=self.person_id,
            pos_x=self.position.x,
            pos_y=self.position.y,
            vel_x=self.velocity.x,
            vel_y=self.velocity.y,
            immunity=self.immunity,
            health=self.health,
            symptom=self.symptoms,
            state=self.state,
            infection_remaining_steps=int(round(self.infection_timer * STEPS_PER_SECOND)),
        )

    @classmethod
    def from_memento(cls, memento: PersonMemento, rng: Random) -> Person:
        """Rebuild an agent from a snapshot record.

        The record carries no infection duration, so a fresh one is drawn
        from *rng*, exactly as at construction.
        """
        person = cls(
            memento.id,
            Vector2D(memento.pos_x, memento.pos_y),
            Vector2D(memento.vel_x, memento.vel_y),
            rng,
        )
        person.immunity = memento.immunity
        person.health = memento.health
        person.symptoms = memento.symptom or SymptomState.ASYMPTOMATIC
        person.state = memento.state
        person.set_infection_progress(memento.infection_remaining_steps / STEPS_PER_SECOND)
        return person

    def set_infection_progress(self, seconds: float) -> None:
        self.infection_timer = seconds
