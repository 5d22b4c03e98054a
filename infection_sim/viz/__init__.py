"""Visualization layer: themes, renderers, and CLI."""

from infection_sim.viz.cli import main
from infection_sim.viz.render import (
    render_census_timeline,
    render_run_animation,
    render_snapshot,
)
from infection_sim.viz.theme import (
    DARK_THEME,
    DEFAULT_THEME,
    REGISTERED_THEMES,
    Theme,
    get_theme,
)

__all__ = [
    "DARK_THEME",
    "DEFAULT_THEME",
    "REGISTERED_THEMES",
    "Theme",
    "get_theme",
    "main",
    "render_census_timeline",
    "render_run_animation",
    "render_snapshot",
]
