from __future__ import annotations

from pathlib import Path

import pytest

from infection_sim.io.paths import (
    census_timeline_path,
    logs_dir,
    resolve_within_base,
    run_summary_path,
    snapshot_path,
    trajectory_log_path,
)


def test_output_layout(tmp_path: Path) -> None:
    assert logs_dir(tmp_path) == tmp_path / "logs"
    assert snapshot_path(tmp_path) == tmp_path / "snapshot.json"
    assert snapshot_path(tmp_path, "after.json") == tmp_path / "after.json"
    assert census_timeline_path(tmp_path).parent == tmp_path / "logs"
    assert trajectory_log_path(tmp_path).suffix == ".parquet"
    assert run_summary_path(tmp_path) == tmp_path / "run_summary.json"


def test_resolve_within_base_accepts_relative(tmp_path: Path) -> None:
    resolved = resolve_within_base(Path("out/plot.png"), tmp_path)
    assert resolved == (tmp_path / "out" / "plot.png").resolve()


def test_resolve_within_base_rejects_escape(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="escapes base_dir"):
        resolve_within_base(Path("../outside.png"), tmp_path)
