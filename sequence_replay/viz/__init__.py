"""Visualization layer: themes, renderers, and CLI."""

from sequence_replay.viz.cli import main
from sequence_replay.viz.render import (
    catalog_bounds,
    cell_bands,
    format_step_legend,
    render_frame,
    render_placement_chart,
    render_replay_animation,
    render_target_preview,
)
from sequence_replay.viz.theme import (
    DEFAULT_THEME,
    PAPER_THEME,
    REGISTERED_THEMES,
    Theme,
    get_theme,
)

__all__ = [
    "DEFAULT_THEME",
    "PAPER_THEME",
    "REGISTERED_THEMES",
    "Theme",
    "catalog_bounds",
    "cell_bands",
    "format_step_legend",
    "get_theme",
    "main",
    "render_frame",
    "render_placement_chart",
    "render_replay_animation",
    "render_target_preview",
]
