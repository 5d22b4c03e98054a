"""Matplotlib-based rendering functions for simulation visualizations."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
import numpy as np
import pyarrow.parquet as pq
from matplotlib import animation
from matplotlib.lines import Line2D

from infection_sim.config.constants import FIELD_HEIGHT, FIELD_WIDTH
from infection_sim.domain.enums import AgentState, HealthState, Immunity
from infection_sim.domain.snapshot import PersonMemento
from infection_sim.io.paths import resolve_within_base as _resolve_within_base
from infection_sim.io.schemas import CENSUS_COUNT_NAMES
from infection_sim.viz.theme import DEFAULT_THEME, Theme

DEFAULT_TIMELINE_COUNTS = ["healthy", "infected", "immune", "remaining"]


def _resolve_paths(base_dir: Path | None, *paths: Path) -> list[Path]:
    """Resolve every path, confining them to *base_dir* when one is given."""
    if base_dir is None:
        return [Path(p).resolve() for p in paths]
    base = Path(base_dir).resolve()
    return [_resolve_within_base(Path(p), base) for p in paths]


# ---------------------------------------------------------------------------
# Marker helpers
# ---------------------------------------------------------------------------


def _agent_color(health: str, immunity: str, theme: Theme = DEFAULT_THEME) -> str:
    """Immune wins over infected, which wins over healthy."""
    if immunity == Immunity.IMMUNE.value:
        return theme.immune_color
    if health == HealthState.INFECTED.value:
        return theme.infected_color
    return theme.healthy_color


def _build_legend_handles(theme: Theme = DEFAULT_THEME) -> list[Line2D]:
    return [
        Line2D([], [], marker="o", linestyle="", color=color, label=label)
        for label, color in (
            ("Healthy", theme.healthy_color),
            ("Infected", theme.infected_color),
            ("Immune", theme.immune_color),
        )
    ]


def _setup_field(ax: plt.Axes, width: float, height: float, theme: Theme) -> None:
    ax.set_xlim(0, width)
    # Screen coordinates: y grows downwards.
    ax.set_ylim(height, 0)
    ax.set_aspect("equal")
    ax.set_facecolor(theme.field_color)
    for spine in ax.spines.values():
        spine.set_edgecolor(theme.border_color)
    ax.set_xticks([])
    ax.set_yticks([])


# ---------------------------------------------------------------------------
# render_snapshot
# ---------------------------------------------------------------------------


def render_snapshot(
    snapshot: Sequence[PersonMemento],
    output_path: Path,
    width: float = FIELD_WIDTH,
    height: float = FIELD_HEIGHT,
    title: str | None = None,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> None:
    """Static scatter of every non-exited agent in a snapshot."""
    if width <= 0 or height <= 0:
        raise ValueError("field dimensions must be > 0")
    (output_path,) = _resolve_paths(base_dir, output_path)

    live = [m for m in snapshot if m.state is not AgentState.EXITED]
    fig, ax = plt.subplots(figsize=(6, 6))
    _setup_field(ax, width, height, theme)
    if live:
        ax.scatter(
            [m.pos_x for m in live],
            [m.pos_y for m in live],
            c=[_agent_color(m.health.value, m.immunity.value, theme) for m in live],
            s=theme.marker_size,
        )
    ax.set_title(title or f"Agents (live={len(live)}, total={len(snapshot)})")
    ax.legend(handles=_build_legend_handles(theme), loc="upper right", fontsize=8)

    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


# ---------------------------------------------------------------------------
# render_census_timeline
# ---------------------------------------------------------------------------


def render_census_timeline(
    timeline_path: Path,
    output_path: Path,
    counts: list[str] | None = None,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> None:
    """Line plot of census counts over simulated time."""
    timeline_path, output_path = _resolve_paths(base_dir, timeline_path, output_path)
    effective_counts = counts if counts is not None else DEFAULT_TIMELINE_COUNTS
    unknown = [name for name in effective_counts if name not in CENSUS_COUNT_NAMES]
    if unknown:
        raise ValueError(f"Unknown census counts: {', '.join(unknown)}")

    rows = pq.read_table(timeline_path).to_pylist()
    if not rows:
        raise ValueError(f"No census rows found in {timeline_path}")
    rows.sort(key=lambda r: float(r["time"]))
    times = [float(r["time"]) for r in rows]

    fig, ax = plt.subplots(figsize=(8, 4))
    for name in effective_counts:
        ax.plot(
            times,
            [int(r[name]) for r in rows],
            label=theme.count_labels.get(name, name),
            color=theme.count_colors.get(name, "tab:blue"),
            linewidth=1.8,
        )
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Agents")
    ax.grid(True, alpha=0.3)
    ax.legend(fontsize=8)

    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


# ---------------------------------------------------------------------------
# render_run_animation
# ---------------------------------------------------------------------------


def render_run_animation(
    trajectory_log_path: Path,
    output_path: Path,
    width: float = FIELD_WIDTH,
    height: float = FIELD_HEIGHT,
    fps: int = 25,
    stride: int = 1,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> None:
    """Animate a trajectory log; one frame per ``stride`` logged steps."""
    if fps < 1:
        raise ValueError("fps must be >= 1")
    if stride < 1:
        raise ValueError("stride must be >= 1")
    trajectory_log_path, output_path = _resolve_paths(
        base_dir, trajectory_log_path, output_path
    )

    rows = pq.read_table(trajectory_log_path).to_pylist()
    if not rows:
        raise ValueError(f"No trajectory rows found in {trajectory_log_path}")
    by_step: dict[int, list[dict[str, Any]]] = {}
    for row in rows:
        by_step.setdefault(int(row["step"]), []).append(row)
    steps = sorted(by_step)[::stride]

    fig, ax = plt.subplots(figsize=(6, 6))
    _setup_field(ax, width, height, theme)
    ax.legend(handles=_build_legend_handles(theme), loc="upper right", fontsize=8)
    scatter = ax.scatter([], [], s=theme.marker_size)

    def update(frame_index: int) -> tuple[Any, ...]:
        step = steps[frame_index]
        frame_rows = by_step[step]
        offsets = np.array([[float(r["x"]), float(r["y"])] for r in frame_rows])
        scatter.set_offsets(offsets.reshape(-1, 2))
        scatter.set_color([_agent_color(r["health"], r["immunity"], theme) for r in frame_rows])
        ax.set_title(f"t={float(frame_rows[0]['time']):.2f}s  live={len(frame_rows)}")
        return (scatter,)

    fig.tight_layout()
    anim = animation.FuncAnimation(
        fig, update, frames=len(steps), interval=max(1, int(1000 / fps)), blit=False
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    writer: animation.PillowWriter | animation.FFMpegWriter
    if output_path.suffix.lower() == ".gif":
        writer = animation.PillowWriter(fps=fps)
    else:
        writer = animation.FFMpegWriter(fps=fps)
    anim.save(output_path, writer=writer)
    plt.close(fig)
