"""Experiments layer: scenario driver and CLI."""

from infection_sim.experiments.runner import build_simulator, run_scenario

__all__ = [
    "build_simulator",
    "run_scenario",
]
