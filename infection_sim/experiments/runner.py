"""Fixed-step scenario driver.

Seeds (or restores) a population, steps it for the configured duration,
jitters live velocities once per step, logs a census line every simulated
second, and persists the final snapshot plus Parquet/JSON run artifacts.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from random import Random

import pyarrow.parquet as pq

from infection_sim.analysis.stats import calculate_from_snapshot, census
from infection_sim.config.constants import FLUSH_THRESHOLD
from infection_sim.config.types import RunConfig, RunResult
from infection_sim.io.paths import (
    census_timeline_path,
    logs_dir,
    run_summary_path,
    snapshot_path,
    trajectory_log_path,
)
from infection_sim.io.schemas import RUN_SUMMARY_SCHEMA_VERSION
from infection_sim.io.snapshots import load_snapshot, save_snapshot
from infection_sim.simulation.engine import Simulator
from infection_sim.simulation.persistence import (
    append_trajectory_rows,
    flush_trajectory_columns,
    new_trajectory_columns,
    write_census_timeline,
)

logger = logging.getLogger(__name__)


def build_simulator(config: RunConfig, rng: Random) -> Simulator:
    """Create the simulator and its starting population."""
    sim = Simulator.from_config(config.simulator, rng)
    if config.resume_from is not None:
        mementos = load_snapshot(config.resume_from)
        sim.restore_snapshot(mementos)
        logger.info("restored %d agents from %s", len(mementos), config.resume_from)
    else:
        params = config.scenario.params
        sim.seed_initial_population(
            config.initial_population, params.immunity_ratio, params.infection_chance
        )
    return sim


def run_scenario(config: RunConfig) -> RunResult:
    """Run one scenario to completion and persist its artifacts."""
    out_dir = Path(config.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    logs_dir(out_dir).mkdir(parents=True, exist_ok=True)

    rng = Random(config.seed)
    sim = build_simulator(config, rng)
    dt = config.dt
    total_steps = config.total_steps
    max_speed = config.simulator.max_speed

    traj_path = trajectory_log_path(out_dir) if config.write_trajectory_log else None
    traj_columns = new_trajectory_columns()
    traj_writer: pq.ParquetWriter | None = None
    timeline_rows: list[dict[str, int | float]] = []

    try:
        for step in range(total_steps):
            sim.step(dt)
            if config.perturb_velocity:
                for person in sim.live_agents:
                    person.apply_random_velocity_perturbation(
                        max_speed, config.perturbation_max_delta, rng
                    )

            elapsed = (step + 1) * dt
            if traj_path is not None:
                append_trajectory_rows(traj_columns, step, elapsed, sim.agents)
                if len(traj_columns["step"]) >= FLUSH_THRESHOLD:
                    traj_writer = flush_trajectory_columns(traj_columns, traj_path, traj_writer)

            if step % config.steps_per_second == 0:
                counts = census(sim.agents)
                logger.info(counts.format_line(int(elapsed)))
                timeline_rows.append({"step": step, "time": elapsed, **counts.to_dict()})

        if traj_path is not None:
            traj_writer = flush_trajectory_columns(traj_columns, traj_path, traj_writer)
    finally:
        if traj_writer is not None:
            traj_writer.close()

    mementos = sim.create_snapshot()
    snap_path = save_snapshot(snapshot_path(out_dir, config.snapshot_name), mementos)
    logger.info("snapshot saved to %s", snap_path)
    timeline_path = write_census_timeline(timeline_rows, census_timeline_path(out_dir))

    final_stats = calculate_from_snapshot(mementos)
    final_census = census(sim.agents)
    summary = {
        "schema_version": RUN_SUMMARY_SCHEMA_VERSION,
        "scenario": config.scenario.value,
        "seed": config.seed,
        "duration": config.duration,
        "steps": total_steps,
        "dt": dt,
        "initial_population": config.initial_population,
        "resumed_from": None if config.resume_from is None else str(config.resume_from),
        "simulator": asdict(config.simulator),
        "snapshot_stats": final_stats.to_dict(),
        "final_census": final_census.to_dict(),
    }
    summary_path = run_summary_path(out_dir)
    summary_path.write_text(json.dumps(summary, ensure_ascii=False, indent=2))

    return RunResult(
        steps=total_steps,
        total=final_census.total,
        remaining=final_census.remaining,
        healthy=final_census.healthy,
        infected=final_census.infected,
        immune=final_census.immune,
        exited=final_census.exited,
        snapshot_path=snap_path,
        timeline_path=timeline_path,
        summary_path=summary_path,
        trajectory_log_path=traj_path if traj_writer is not None else None,
    )
