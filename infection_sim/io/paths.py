"""Path construction helpers for run output directories.

Centralises the directory/file naming conventions used by the run driver,
the CLI, and the renderers.
"""

from __future__ import annotations

from pathlib import Path


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve *path* and ensure it stays within the trusted *base_dir*.

    Raises :exc:`ValueError` if the resolved path escapes the base directory.
    """
    candidate = path if path.is_absolute() else base_dir / path
    resolved = candidate.resolve()
    base_resolved = base_dir.resolve()
    if resolved != base_resolved and base_resolved not in resolved.parents:
        raise ValueError(f"Path escapes base_dir: {path}")
    return resolved


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def snapshot_path(out_dir: Path, name: str = "snapshot.json") -> Path:
    """Return path to the persisted population snapshot."""
    return out_dir / name


def census_timeline_path(out_dir: Path) -> Path:
    """Return path to the per-second census Parquet file."""
    return logs_dir(out_dir) / "census_timeline.parquet"


def trajectory_log_path(out_dir: Path) -> Path:
    """Return path to the per-step trajectory log Parquet file."""
    return logs_dir(out_dir) / "trajectory_log.parquet"


def run_summary_path(out_dir: Path) -> Path:
    """Return path to the run summary JSON file."""
    return out_dir / "run_summary.json"
