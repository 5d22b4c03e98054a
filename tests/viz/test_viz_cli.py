"""Tests for viz/cli.py: argument parsing and subcommand dispatch."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from infection_sim.viz.cli import _parse_counts, main


def test_parse_counts_valid() -> None:
    assert _parse_counts("infected, immune") == ["infected", "immune"]


def test_parse_counts_none() -> None:
    assert _parse_counts(None) is None


def test_parse_counts_empty() -> None:
    with pytest.raises(ValueError, match="counts must not be empty"):
        _parse_counts(" , ")


def test_main_no_subcommand_exits() -> None:
    with patch.object(sys, "argv", ["infection-sim-viz"]):
        with pytest.raises(SystemExit):
            main()


def test_main_timeline_dispatches(tmp_path: Path) -> None:
    timeline = tmp_path / "census_timeline.parquet"
    output = tmp_path / "timeline.png"
    argv = [
        "infection-sim-viz",
        "timeline",
        "--timeline",
        str(timeline),
        "--output",
        str(output),
        "--counts",
        "infected,immune",
        "--theme",
        "dark",
        "--base-dir",
        str(tmp_path),
    ]
    with patch.object(sys, "argv", argv):
        with patch("infection_sim.viz.cli.render_census_timeline") as mock_render:
            main()
    mock_render.assert_called_once()
    kwargs = mock_render.call_args.kwargs
    assert kwargs["timeline_path"] == timeline
    assert kwargs["counts"] == ["infected", "immune"]
    assert kwargs["base_dir"] == tmp_path
    assert kwargs["theme"].field_color == "#1A1A1A"


def test_main_animation_dispatches(tmp_path: Path) -> None:
    trajectory = tmp_path / "trajectory_log.parquet"
    output = tmp_path / "run.gif"
    argv = [
        "animation",
        "--trajectory-log",
        str(trajectory),
        "--output",
        str(output),
        "--fps",
        "10",
        "--stride",
        "5",
        "--height",
        "20",
    ]
    with patch("infection_sim.viz.cli.render_run_animation") as mock_render:
        main(argv)
    kwargs = mock_render.call_args.kwargs
    assert kwargs["fps"] == 10
    assert kwargs["stride"] == 5
    assert kwargs["height"] == 20.0
    assert "width" not in kwargs
