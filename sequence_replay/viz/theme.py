"""Visualization theme presets for replay renderers.

Themes are frozen dataclasses grouping every styling token, so renderers
take a ``Theme`` instead of reading module-level constants and the CLI can
swap palettes with ``--theme``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sequence_replay.config.constants import DISCIPLINES


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    # Per-discipline display
    discipline_colors: dict[str, str] = field(default_factory=dict)
    discipline_labels: dict[str, str] = field(default_factory=dict)

    # Cells
    untouched_cell_color: str = "#808080"
    cell_edge_color: str = "#000000"
    background_color: str = "#FFFFFF"

    # Step legend
    noop_color: str = "#888888"
    invalid_color: str = "#FF9B9B"
    missing_color: str = "#BBBBBB"

    def color_for(self, discipline: str) -> str:
        return self.discipline_colors.get(discipline, self.untouched_cell_color)

    def label_for(self, discipline: str) -> str:
        return self.discipline_labels.get(discipline, discipline)


# ---------------------------------------------------------------------------
# Built-in presets
# ---------------------------------------------------------------------------

_DEFAULT_DISCIPLINE_COLORS: dict[str, str] = {
    "piling": "#00D4FF",
    "structural_steel": "#FF3B3B",
    "piping": "#00C853",
    "equipment": "#FF9800",
    "instrumentation": "#9C27B0",
    "cable_tray": "#9E9E9E",
    "electrical": "#FFEB3B",
    "insulation": "#FFFFFF",
}

_DEFAULT_DISCIPLINE_LABELS: dict[str, str] = {
    d: d.replace("_", " ").title() for d in DISCIPLINES
}

DEFAULT_THEME = Theme(
    discipline_colors=_DEFAULT_DISCIPLINE_COLORS,
    discipline_labels=_DEFAULT_DISCIPLINE_LABELS,
)

PAPER_THEME = Theme(
    discipline_colors={
        "piling": "#1f77b4",
        "structural_steel": "#d62728",
        "piping": "#2ca02c",
        "equipment": "#ff7f0e",
        "instrumentation": "#9467bd",
        "cable_tray": "#7f7f7f",
        "electrical": "#bcbd22",
        "insulation": "#e0e0e0",
    },
    discipline_labels=_DEFAULT_DISCIPLINE_LABELS,
    untouched_cell_color="#BFBFBF",
    cell_edge_color="#333333",
)

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "paper": PAPER_THEME,
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name (case-insensitive)."""
    key = name.lower()
    if key not in REGISTERED_THEMES:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; available: {valid}")
    return REGISTERED_THEMES[key]
