"""CLI entrypoint for scenario runs, snapshot statistics, and rendering.

This module owns CLI argument parsing and mode dispatch. All domain logic
lives in the extracted modules:

- ``infection_sim.config``: configuration dataclasses
- ``infection_sim.simulation.engine``: the ``Simulator``
- ``infection_sim.experiments.runner``: ``run_scenario`` driver
- ``infection_sim.analysis.stats``: snapshot statistics
- ``infection_sim.viz``: renderers
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path

from infection_sim.analysis.stats import calculate_from_snapshot
from infection_sim.config.constants import (
    FIELD_HEIGHT,
    FIELD_WIDTH,
    INFECT_DISTANCE,
    INFECT_TIME,
    INITIAL_POPULATION,
    MAX_SPEED,
    PERTURBATION_MAX_DELTA,
    SIMULATION_DURATION,
    STEPS_PER_SECOND,
    TARGET_POPULATION,
)
from infection_sim.config.types import RunConfig, Scenario, SimulatorConfig
from infection_sim.experiments.runner import run_scenario
from infection_sim.io.snapshots import load_snapshot
from infection_sim.viz.cli import add_render_parsers

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _parse_scenario(raw_scenario: str) -> Scenario:
    """Parse scenario name from CLI/config."""
    try:
        return Scenario(raw_scenario)
    except ValueError as exc:
        valid = ", ".join(s.value for s in Scenario)
        raise ValueError(f"scenario must be one of {valid}") from exc


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_str(raw: object, key: str) -> str:
    """Coerce raw value to str; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_bool(cli_val: bool | None, key: str, file_cfg: dict[str, object], default: bool) -> bool:
    return _coerce_bool(_get_val(cli_val, key, file_cfg, default), key)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _get_optional_path(
    cli_val: Path | None, key: str, file_cfg: dict[str, object]
) -> Path | None:
    raw = _get_val(cli_val, key, file_cfg, None)
    if raw is None:
        return None
    return Path(_coerce_str(raw, key))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _build_run_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("run", help="Run one scenario and persist its artifacts")
    p.set_defaults(func=_handle_run)
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    p.add_argument("--scenario", type=str, choices=[s.value for s in Scenario], default=None)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--duration", type=float, default=None, help="Simulated seconds")
    p.add_argument("--population", type=int, default=None)
    p.add_argument("--steps-per-second", type=int, default=None)
    p.add_argument("--width", type=float, default=None)
    p.add_argument("--height", type=float, default=None)
    p.add_argument("--max-speed", type=float, default=None)
    p.add_argument("--infect-distance", type=float, default=None)
    p.add_argument("--infect-time", type=float, default=None)
    p.add_argument("--target-population", type=int, default=None)
    p.add_argument("--perturb-velocity", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--perturbation-max-delta", type=float, default=None)
    p.add_argument("--out-dir", type=Path, default=None)
    p.add_argument("--trajectory-log", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--snapshot-name", type=str, default=None)
    p.add_argument("--resume-from", type=Path, default=None)


def _build_stats_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("stats", help="Print category counts for a snapshot file")
    p.set_defaults(func=_handle_stats)
    p.add_argument("--snapshot", type=Path, required=True)


def _build_render_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("render", help="Render snapshots, timelines, and animations")
    render_sub = p.add_subparsers(dest="render_command")
    add_render_parsers(render_sub)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Agent-based infection spread simulator")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command")
    _build_run_parser(sub)
    _build_stats_parser(sub)
    _build_render_parser(sub)
    return parser


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _load_file_config(parser: argparse.ArgumentParser, path: Path | None) -> dict[str, object]:
    if path is None:
        return {}
    try:
        file_cfg = json.loads(Path(path).read_text())
    except FileNotFoundError:
        parser.error(f"Config file not found: {path}")
    except json.JSONDecodeError as exc:
        parser.error(f"Config file is not valid JSON: {path}: {exc}")
    if not isinstance(file_cfg, dict):
        parser.error(f"Config file must contain a JSON object: {path}")
    return file_cfg


def _run_config_from_args(args: argparse.Namespace, file_cfg: dict[str, object]) -> RunConfig:
    """Resolve a RunConfig with CLI > file > default precedence."""
    simulator = SimulatorConfig(
        width=_get_float(args.width, "width", file_cfg, FIELD_WIDTH),
        height=_get_float(args.height, "height", file_cfg, FIELD_HEIGHT),
        max_speed=_get_float(args.max_speed, "max_speed", file_cfg, MAX_SPEED),
        infect_distance=_get_float(
            args.infect_distance, "infect_distance", file_cfg, INFECT_DISTANCE
        ),
        infect_time=_get_float(args.infect_time, "infect_time", file_cfg, INFECT_TIME),
        target_population=_get_int(
            args.target_population, "target_population", file_cfg, TARGET_POPULATION
        ),
    )
    return RunConfig(
        scenario=_parse_scenario(
            _get_str(args.scenario, "scenario", file_cfg, Scenario.NORMAL.value)
        ),
        simulator=simulator,
        initial_population=_get_int(args.population, "population", file_cfg, INITIAL_POPULATION),
        duration=_get_float(args.duration, "duration", file_cfg, SIMULATION_DURATION),
        steps_per_second=_get_int(
            args.steps_per_second, "steps_per_second", file_cfg, STEPS_PER_SECOND
        ),
        perturb_velocity=_get_bool(args.perturb_velocity, "perturb_velocity", file_cfg, True),
        perturbation_max_delta=_get_float(
            args.perturbation_max_delta,
            "perturbation_max_delta",
            file_cfg,
            PERTURBATION_MAX_DELTA,
        ),
        seed=_get_int(args.seed, "seed", file_cfg, 0),
        out_dir=Path(_get_str(args.out_dir, "out_dir", file_cfg, "data")),
        write_trajectory_log=_get_bool(args.trajectory_log, "trajectory_log", file_cfg, False),
        snapshot_name=_get_str(args.snapshot_name, "snapshot_name", file_cfg, "snapshot.json"),
        resume_from=_get_optional_path(args.resume_from, "resume_from", file_cfg),
    )


def _handle_run(args: argparse.Namespace) -> None:
    file_cfg = _load_file_config(args.parser, args.config)
    try:
        config = _run_config_from_args(args, file_cfg)
    except ValueError as exc:
        args.parser.error(str(exc))
    result = run_scenario(config)
    summary = {
        "scenario": config.scenario.value,
        "seed": config.seed,
        **{
            key: (str(value) if isinstance(value, Path) else value)
            for key, value in asdict(result).items()
        },
    }
    print(json.dumps(summary, ensure_ascii=False, indent=2))


def _handle_stats(args: argparse.Namespace) -> None:
    try:
        snapshot = load_snapshot(args.snapshot)
    except FileNotFoundError:
        args.parser.error(f"Snapshot file not found: {args.snapshot}")
    except ValueError as exc:
        args.parser.error(str(exc))
    stats = calculate_from_snapshot(snapshot)
    print(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2))


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint.

    ``run`` supports ``--config path/to/config.json`` for reproducibility.
    CLI arguments override config-file values; config-file values override
    built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        raise SystemExit(1)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.parser = parser
    args.func(args)


if __name__ == "__main__":
    main()
