"""Subcommands for rendering snapshots, census timelines, and run animations."""

from __future__ import annotations

import argparse
from pathlib import Path

from infection_sim.io.snapshots import load_snapshot
from infection_sim.viz.render import (
    render_census_timeline,
    render_run_animation,
    render_snapshot,
)
from infection_sim.viz.theme import REGISTERED_THEMES, get_theme


def _add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--base-dir", type=Path, default=None)
    p.add_argument("--theme", type=str, choices=sorted(REGISTERED_THEMES), default="default")


def _build_snapshot_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("snapshot", help="Render a static plot of a snapshot file")
    p.set_defaults(func=_handle_snapshot)
    p.add_argument("--snapshot", type=Path, required=True)
    p.add_argument("--width", type=float, default=None)
    p.add_argument("--height", type=float, default=None)
    p.add_argument("--title", type=str, default=None)
    _add_common_arguments(p)


def _build_timeline_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("timeline", help="Plot census counts over time")
    p.set_defaults(func=_handle_timeline)
    p.add_argument("--timeline", type=Path, required=True)
    p.add_argument(
        "--counts",
        type=str,
        default=None,
        help="Comma-separated census columns (default: healthy,infected,immune,remaining)",
    )
    _add_common_arguments(p)


def _build_animation_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("animation", help="Animate a trajectory log (GIF or video)")
    p.set_defaults(func=_handle_animation)
    p.add_argument("--trajectory-log", type=Path, required=True)
    p.add_argument("--width", type=float, default=None)
    p.add_argument("--height", type=float, default=None)
    p.add_argument("--fps", type=int, default=25)
    p.add_argument("--stride", type=int, default=1)
    _add_common_arguments(p)


def add_render_parsers(sub: argparse._SubParsersAction) -> None:
    """Register the snapshot/timeline/animation subcommands on *sub*."""
    _build_snapshot_parser(sub)
    _build_timeline_parser(sub)
    _build_animation_parser(sub)


def _parse_counts(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    counts = [part.strip() for part in raw.split(",") if part.strip()]
    if not counts:
        raise ValueError("counts must not be empty")
    return counts


def _field_kwargs(args: argparse.Namespace) -> dict[str, float]:
    kwargs: dict[str, float] = {}
    if args.width is not None:
        kwargs["width"] = args.width
    if args.height is not None:
        kwargs["height"] = args.height
    return kwargs


def _handle_snapshot(args: argparse.Namespace) -> None:
    render_snapshot(
        snapshot=load_snapshot(args.snapshot),
        output_path=args.output,
        title=args.title,
        base_dir=args.base_dir,
        theme=get_theme(args.theme),
        **_field_kwargs(args),
    )


def _handle_timeline(args: argparse.Namespace) -> None:
    render_census_timeline(
        timeline_path=args.timeline,
        output_path=args.output,
        counts=_parse_counts(args.counts),
        base_dir=args.base_dir,
        theme=get_theme(args.theme),
    )


def _handle_animation(args: argparse.Namespace) -> None:
    render_run_animation(
        trajectory_log_path=args.trajectory_log,
        output_path=args.output,
        fps=args.fps,
        stride=args.stride,
        base_dir=args.base_dir,
        theme=get_theme(args.theme),
        **_field_kwargs(args),
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Render infection simulation outputs")
    sub = parser.add_subparsers(dest="command")
    add_render_parsers(sub)
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        raise SystemExit(1)
    args.func(args)


if __name__ == "__main__":
    main()
