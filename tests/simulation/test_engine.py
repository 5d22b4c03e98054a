"""Tests for infection_sim.simulation.engine module."""

from __future__ import annotations

from random import Random

import pytest

from infection_sim.domain.enums import AgentState, HealthState, Immunity, SymptomState
from infection_sim.domain.snapshot import PersonMemento
from infection_sim.domain.vector import Vector2D
from infection_sim.simulation.engine import Simulator, pair_key


def _memento(
    agent_id: int,
    x: float,
    y: float,
    *,
    vx: float = 0.0,
    vy: float = 0.0,
    infected: bool = False,
    immune: bool = False,
    symptom: SymptomState = SymptomState.SYMPTOMATIC,
) -> PersonMemento:
    return PersonMemento(
        id=agent_id,
        pos_x=x,
        pos_y=y,
        vel_x=vx,
        vel_y=vy,
        immunity=Immunity.IMMUNE if immune else Immunity.SUSCEPTIBLE,
        health=HealthState.INFECTED if infected else HealthState.HEALTHY,
        symptom=symptom if infected else SymptomState.ASYMPTOMATIC,
        state=AgentState.MOVING,
        infection_remaining_steps=0,
    )


def _quiet_sim(seed: int = 0) -> Simulator:
    """30x30 field with no population top-up."""
    return Simulator(30.0, 30.0, 2.5, rng=Random(seed), target_population=0)


class TestSimulatorValidation:
    def test_rejects_bad_geometry(self) -> None:
        with pytest.raises(ValueError, match="field dimensions"):
            Simulator(0.0, 30.0, 2.5)

    def test_rejects_max_speed_below_spawn_floor(self) -> None:
        with pytest.raises(ValueError, match="max_speed"):
            Simulator(30.0, 30.0, 0.1)

    def test_rejects_non_positive_dt(self) -> None:
        sim = _quiet_sim()
        with pytest.raises(ValueError, match="dt must be > 0"):
            sim.step(0.0)

    def test_rejects_bad_seed_probabilities(self) -> None:
        sim = _quiet_sim()
        with pytest.raises(ValueError, match="immunity_ratio"):
            sim.seed_initial_population(5, 1.5, 0.1)
        with pytest.raises(ValueError, match="count"):
            sim.seed_initial_population(-1, 0.0, 0.1)


class TestSimulatorSpawn:
    def test_initial_population_on_edges_heading_inward(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(7))
        sim.seed_initial_population(50, 0.0, 0.1)
        assert len(sim.agents) == 50
        center = Vector2D(15.0, 15.0)
        for p in sim.agents:
            x, y = p.position.components()
            assert x in (0.0, 30.0) or y in (0.0, 30.0)
            assert 0.0 <= x <= 30.0 and 0.0 <= y <= 30.0
            assert 0.2 <= p.velocity.length() <= 2.5 + 1e-9
            assert p.velocity.dot(center - p.position) > 0.0

    def test_normal_scenario_seeding_counts(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(1))
        sim.seed_initial_population(50, 0.0, 0.1)
        assert not any(p.is_immune for p in sim.agents)
        infected = sum(1 for p in sim.agents if p.is_infected)
        # Binomial(50, 0.1): mean 5, sd ~2.1
        assert 0 <= infected <= 15

    def test_full_immunity_blocks_initial_infection(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(1))
        sim.seed_initial_population(40, 1.0, 1.0)
        assert all(p.is_immune and not p.is_infected for p in sim.agents)

    def test_ids_are_sequential_from_one(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(2))
        sim.seed_initial_population(10, 0.0, 0.0)
        assert [p.person_id for p in sim.agents] == list(range(1, 11))
        assert sim.next_id == 11

    def test_same_seed_same_population(self) -> None:
        a = Simulator(30.0, 30.0, 2.5, rng=Random(99))
        b = Simulator(30.0, 30.0, 2.5, rng=Random(99))
        a.seed_initial_population(20, 0.3, 0.2)
        b.seed_initial_population(20, 0.3, 0.2)
        assert a.create_snapshot() == b.create_snapshot()


class TestPopulationMaintenance:
    def test_live_count_never_below_target(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(3))
        sim.seed_initial_population(50, 0.0, 0.1)
        for _ in range(500):
            sim.step(0.04)
            assert sim.alive_count >= 50

    def test_exits_are_replaced_by_new_agents(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(3))
        sim.seed_initial_population(50, 0.0, 0.1)
        for _ in range(1500):
            sim.step(0.04)
        exited = sum(1 for p in sim.agents if p.is_exited)
        assert exited > 0
        assert len(sim.agents) == 50 + exited

    def test_maintenance_never_removes(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(4), target_population=10)
        sim.seed_initial_population(25, 0.0, 0.0)
        sim.maintain_population()
        assert sim.alive_count == 25

    def test_maintenance_tops_up_empty_field(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(4))
        sim.maintain_population()
        assert sim.alive_count == 50
        assert not any(p.is_immune for p in sim.agents)


class TestBorders:
    def test_border_either_reflects_or_exits(self) -> None:
        reflected = exited = 0
        for seed in range(60):
            sim = _quiet_sim(seed)
            sim.restore_snapshot([_memento(1, 29.98, 10.0, vx=1.0, vy=0.5)])
            sim.step(0.04)
            person = sim.agents[0]
            if person.is_exited:
                exited += 1
                assert person.velocity == Vector2D(1.0, 0.5)
            else:
                reflected += 1
                assert person.velocity == Vector2D(-1.0, 0.5)
        assert reflected > 0
        assert exited > 0

    def test_corner_reflects_both_components(self) -> None:
        for seed in range(30):
            sim = _quiet_sim(seed)
            sim.restore_snapshot([_memento(1, 0.01, 0.01, vx=-1.0, vy=-1.0)])
            sim.step(0.04)
            person = sim.agents[0]
            if not person.is_exited:
                assert person.velocity == Vector2D(1.0, 1.0)

    def test_exited_agent_stays_put(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot([_memento(1, 5.0, 5.0, vx=1.0)])
        sim.agents[0].mark_exited()
        sim.step(0.04)
        assert sim.agents[0].position == Vector2D(5.0, 5.0)


class TestContactTransmission:
    def test_transmission_requires_accumulated_contact(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot(
            [_memento(1, 10.0, 10.0, infected=True), _memento(2, 11.0, 10.0)]
        )
        target = sim.agents[1]
        for _ in range(74):
            sim.step(0.04)
        assert sim.contact_time(1, 2) == pytest.approx(2.96)
        assert not target.is_infected

        extra_steps = 0
        while not target.is_infected and extra_steps < 3:
            sim.step(0.04)
            extra_steps += 1
        assert target.is_infected
        assert sim.contact_time(2, 1) >= 3.0

    def test_distance_threshold_is_inclusive(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot([_memento(1, 10.0, 10.0), _memento(2, 12.0, 10.0)])
        sim.step(0.04)
        assert sim.contact_time(1, 2) == pytest.approx(0.04)

    def test_timer_resets_when_out_of_range(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot([_memento(1, 10.0, 10.0), _memento(2, 11.0, 10.0)])
        for _ in range(10):
            sim.step(0.04)
        assert sim.contact_time(1, 2) == pytest.approx(0.4)

        far = sim.agents[1]
        far.position = Vector2D(20.0, 10.0)
        sim.step(0.04)
        assert pair_key(1, 2) not in sim.proximity_timers
        assert sim.contact_time(1, 2) == 0.0

        far.position = Vector2D(11.0, 10.0)
        sim.step(0.04)
        assert sim.contact_time(1, 2) == pytest.approx(0.04)

    def test_exited_agents_accrue_no_contact(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot(
            [_memento(1, 10.0, 10.0, infected=True), _memento(2, 11.0, 10.0)]
        )
        sim.agents[1].mark_exited()
        for _ in range(100):
            sim.step(0.04)
        assert sim.contact_time(1, 2) == 0.0
        assert not sim.agents[1].is_infected

    def test_immune_agent_never_infected(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot(
            [_memento(1, 10.0, 10.0, infected=True), _memento(2, 11.0, 10.0, immune=True)]
        )
        for _ in range(100):
            sim.step(0.04)
        assert not sim.agents[1].is_infected

    def test_pair_key_is_order_independent(self) -> None:
        assert pair_key(5, 2) == pair_key(2, 5) == (2, 5)


class TestSnapshotRestore:
    def test_round_trip_reproduces_records(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(12))
        sim.seed_initial_population(50, 0.0, 0.3)
        for _ in range(250):
            sim.step(0.04)
        snapshot = sim.create_snapshot()

        restored = Simulator(30.0, 30.0, 2.5, rng=Random(0))
        restored.restore_snapshot(snapshot)
        assert restored.create_snapshot() == snapshot
        assert restored.next_id == max(m.id for m in snapshot) + 1

    def test_restore_sorts_by_id_and_clears_timers(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot([_memento(1, 10.0, 10.0), _memento(2, 11.0, 10.0)])
        sim.step(0.04)
        assert sim.proximity_timers

        sim.restore_snapshot([_memento(9, 1.0, 1.0), _memento(4, 2.0, 2.0)])
        assert [p.person_id for p in sim.agents] == [4, 9]
        assert sim.proximity_timers == {}
        assert sim.next_id == 10

    def test_restore_rejects_duplicate_ids(self) -> None:
        sim = _quiet_sim(0)
        with pytest.raises(ValueError, match="duplicate"):
            sim.restore_snapshot([_memento(3, 1.0, 1.0), _memento(3, 2.0, 2.0)])

    def test_restore_empty_snapshot(self) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot([])
        assert sim.agents == ()
        assert sim.next_id == 1


class TestRunInvariants:
    def test_immune_agents_are_healthy_and_exited_agents_frozen(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(21))
        sim.seed_initial_population(50, 0.0, 0.5)
        frozen: dict[int, tuple[Vector2D, Vector2D]] = {}
        for _ in range(1500):
            sim.step(0.04)
            for p in sim.agents:
                if p.is_immune:
                    assert p.health is HealthState.HEALTHY
                if p.is_exited:
                    state = (p.position, p.velocity)
                    assert frozen.setdefault(p.person_id, state) == state
        assert frozen

    def test_recovered_agents_stay_immune(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(22))
        sim.seed_initial_population(50, 0.0, 1.0)
        recovered: set[int] = set()
        for _ in range(1000):
            sim.step(0.04)
            for p in sim.agents:
                if p.person_id in recovered:
                    assert p.is_immune and not p.is_infected
                elif p.is_immune:
                    recovered.add(p.person_id)
        assert recovered


class TestStepOrder:
    def test_agent_exiting_this_tick_neither_accrues_nor_transmits(self) -> None:
        exits = reflections = 0
        for seed in range(40):
            sim = Simulator(
                30.0, 30.0, 2.5, rng=Random(seed), infect_time=0.0, target_population=0
            )
            sim.restore_snapshot(
                [
                    _memento(1, 29.98, 10.0, vx=1.0, infected=True),
                    _memento(2, 29.0, 10.0),
                ]
            )
            source, target = sim.agents
            sim.step(0.04)
            if source.is_exited:
                exits += 1
                assert not target.is_infected
                assert pair_key(1, 2) not in sim.proximity_timers
            else:
                reflections += 1
                assert target.is_infected
                assert sim.contact_time(1, 2) == pytest.approx(0.04)
        assert exits > 0
        assert reflections > 0

    def test_replacement_accrues_contact_in_spawn_tick(self) -> None:
        sim = Simulator(
            30.0, 30.0, 2.5, rng=Random(0), infect_distance=100.0, target_population=2
        )
        sim.restore_snapshot([_memento(1, 15.0, 15.0)])
        sim.step(0.04)
        assert [p.person_id for p in sim.agents] == [1, 2]
        assert sim.proximity_timers == pytest.approx({(1, 2): 0.04})


class TestContactTimerCleanup:
    @pytest.mark.parametrize("exiting_id", [1, 2])
    def test_timer_dropped_when_partner_exits(self, exiting_id: int) -> None:
        sim = _quiet_sim(0)
        sim.restore_snapshot([_memento(1, 10.0, 10.0), _memento(2, 11.0, 10.0)])
        for _ in range(10):
            sim.step(0.04)
        assert sim.contact_time(1, 2) == pytest.approx(0.4)

        sim.agents[exiting_id - 1].mark_exited()
        sim.step(0.04)
        assert sim.proximity_timers == {}
        assert sim.contact_time(1, 2) == 0.0

    def test_no_timers_reference_exited_agents(self) -> None:
        sim = Simulator(30.0, 30.0, 2.5, rng=Random(6))
        sim.seed_initial_population(50, 0.0, 0.1)
        for _ in range(1000):
            sim.step(0.04)
            exited = {p.person_id for p in sim.agents if p.is_exited}
            for a_id, b_id in sim.proximity_timers:
                assert a_id not in exited and b_id not in exited
        assert any(p.is_exited for p in sim.agents)
