"""Parquet persistence helpers for trajectory log and census streams."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from infection_sim.domain.person import Person
from infection_sim.io.schemas import CENSUS_SCHEMA, TRAJECTORY_SCHEMA


def new_trajectory_columns() -> dict[str, list[int | float | str | None]]:
    return {field.name: [] for field in TRAJECTORY_SCHEMA}


def append_trajectory_rows(
    columns: dict[str, list[int | float | str | None]],
    step: int,
    time: float,
    agents: Sequence[Person],
) -> None:
    """Buffer one row per live agent for this step."""
    for person in agents:
        if person.is_exited:
            continue
        columns["step"].append(step)
        columns["time"].append(time)
        columns["agent_id"].append(person.person_id)
        columns["x"].append(person.position.x)
        columns["y"].append(person.position.y)
        columns["health"].append(person.health.value)
        columns["immunity"].append(person.immunity.value)
        columns["symptom"].append(person.symptoms.value if person.is_infected else None)
        columns["state"].append(person.state.value)


def flush_trajectory_columns(
    columns: dict[str, list[int | float | str | None]],
    trajectory_log_path: Path,
    writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated trajectory rows to Parquet and clear in-memory buffers."""
    if not columns["step"]:
        return writer
    table = pa.Table.from_pydict(columns, schema=TRAJECTORY_SCHEMA)
    if writer is None:
        writer = pq.ParquetWriter(trajectory_log_path, TRAJECTORY_SCHEMA)
    writer.write_table(table)
    for values in columns.values():
        values.clear()
    return writer


def write_census_timeline(rows: list[dict[str, int | float]], path: Path) -> Path:
    """Write the per-second census rows as a single Parquet table."""
    table = pa.Table.from_pylist(rows, schema=CENSUS_SCHEMA)
    pq.write_table(table, path)
    return path
