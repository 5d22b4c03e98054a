"""Visualization theme presets for simulation renderers.

Themes are frozen dataclasses that group all styling constants together.
Renderers accept a ``Theme`` instance instead of referencing hard-coded
module-level constants, so palettes can be swapped via the ``--theme`` CLI
argument or programmatically.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    # Agent markers
    healthy_color: str = "#4CAF50"
    infected_color: str = "#F44336"
    immune_color: str = "#FFC107"
    marker_size: float = 36.0

    # Field
    field_color: str = "#FFFFFF"
    border_color: str = "#333333"

    # Census timeline
    count_labels: dict[str, str] = field(default_factory=dict)
    count_colors: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Built-in presets
# ---------------------------------------------------------------------------

_DEFAULT_COUNT_LABELS: dict[str, str] = {
    "remaining": "Remaining",
    "total": "Total spawned",
    "healthy": "Healthy",
    "infected": "Infected",
    "immune": "Immune",
    "exited": "Exited",
}

_DEFAULT_COUNT_COLORS: dict[str, str] = {
    "remaining": "tab:blue",
    "total": "tab:gray",
    "healthy": "#4CAF50",
    "infected": "#F44336",
    "immune": "#FFC107",
    "exited": "tab:purple",
}

DEFAULT_THEME = Theme(
    count_labels=_DEFAULT_COUNT_LABELS,
    count_colors=_DEFAULT_COUNT_COLORS,
)

DARK_THEME = Theme(
    healthy_color="#66BB6A",
    infected_color="#EF5350",
    immune_color="#FFEE58",
    field_color="#1A1A1A",
    border_color="#CCCCCC",
    count_labels=_DEFAULT_COUNT_LABELS,
    count_colors={
        **_DEFAULT_COUNT_COLORS,
        "healthy": "#66BB6A",
        "infected": "#EF5350",
        "immune": "#FFEE58",
    },
)

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "dark": DARK_THEME,
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name (case-insensitive)."""
    key = name.lower()
    if key not in REGISTERED_THEMES:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; available: {valid}")
    return REGISTERED_THEMES[key]
