"""Matplotlib-based rendering functions for replay visualizations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
import numpy as np
from matplotlib import animation
from matplotlib.colors import to_rgb
from matplotlib.patches import Patch

from sequence_replay.config.constants import DISCIPLINES, PREVIEW_HEIGHT_PX, PREVIEW_WIDTH_PX
from sequence_replay.domain.catalog import Catalog, Coordinate
from sequence_replay.domain.completion import brightness_for_completion, counts_to_mix
from sequence_replay.domain.decoder import ActionDescription
from sequence_replay.io.paths import resolve_within_base as _resolve_within_base
from sequence_replay.replay.engine import EngineState, FinalState, ReplayEngine
from sequence_replay.replay.sinks import CellUpdate
from sequence_replay.replay.telemetry import PlacementTelemetry
from sequence_replay.viz.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

_DPI = 100
Bounds = tuple[tuple[int, int], tuple[int, int], tuple[int, int]]


def _resolve_output(output_path: Path, base_dir: Path | None) -> Path:
    if base_dir is None:
        return Path(output_path).resolve()
    return _resolve_within_base(Path(output_path), Path(base_dir).resolve())


# ---------------------------------------------------------------------------
# Cell colour helpers
# ---------------------------------------------------------------------------


def cell_bands(
    update: CellUpdate, theme: Theme = DEFAULT_THEME
) -> list[tuple[float, np.ndarray]]:
    """Return ``(height, rgb)`` bands stacked bottom-up for one cell.

    Band heights follow the discipline mix; colours are darkened by the
    cell's completion. A cell without work is a single untouched band.
    """
    shade = brightness_for_completion(update.completion)
    mix = counts_to_mix(update.counts)
    if not mix:
        return [(1.0, np.array(to_rgb(theme.untouched_cell_color)))]
    return [(weight, np.array(to_rgb(theme.color_for(d))) * shade) for d, weight in mix]


def _bounds_of(coords: Iterable[Coordinate]) -> Bounds:
    points = np.array(list(coords), dtype=int).reshape(-1, 3)
    if points.size == 0:
        return ((0, 1), (0, 1), (0, 1))
    lo = points.min(axis=0)
    hi = points.max(axis=0) + 1
    return ((int(lo[0]), int(hi[0])), (int(lo[1]), int(hi[1])), (int(lo[2]), int(hi[2])))


def catalog_bounds(catalog: Catalog) -> Bounds:
    """Axis limits enclosing every placement in *catalog*."""
    return _bounds_of(p.coord for d in catalog for p in d.placements)


def _draw_cells(
    ax: Any,
    updates: Iterable[CellUpdate],
    bounds: Bounds,
    theme: Theme = DEFAULT_THEME,
    include_hidden: bool = False,
) -> int:
    """Draw unit cubes on a 3D *ax*; returns the number of cells drawn."""
    drawn = 0
    for update in updates:
        if not (update.visible or include_hidden):
            continue
        x, y, z = update.coord
        base = float(z)
        for height, rgb in cell_bands(update, theme):
            ax.bar3d(
                x,
                y,
                base,
                1.0,
                1.0,
                height,
                color=tuple(rgb),
                edgecolor=theme.cell_edge_color,
                linewidth=0.3,
                shade=False,
            )
            base += height
        drawn += 1
    (x0, x1), (y0, y1), (z0, z1) = bounds
    ax.set_xlim(x0, x1)
    ax.set_ylim(y0, y1)
    ax.set_zlim(z0, z1)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_zlabel("z")
    ax.set_facecolor(theme.background_color)
    return drawn


def _discipline_handles(theme: Theme = DEFAULT_THEME) -> list[Patch]:
    return [
        Patch(facecolor=theme.color_for(d), edgecolor="gray", label=theme.label_for(d))
        for d in DISCIPLINES
    ]


def format_step_legend(step: int, descriptions: Sequence[ActionDescription]) -> str:
    """Plain-text legend of each discipline's action at *step*."""
    lines = [f"Actions @ step {step}"]
    lines.extend(f"{d.discipline}: {d.label()}" for d in descriptions)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# render_target_preview
# ---------------------------------------------------------------------------


def render_target_preview(
    final_state: FinalState,
    output_path: Path,
    base_dir: Path | None = None,
    include_hidden: bool = True,
    width_px: int = PREVIEW_WIDTH_PX,
    height_px: int = PREVIEW_HEIGHT_PX,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Render the end-of-episode target as a PNG.

    Hidden (sliced-away) cells are drawn unless ``include_hidden`` is False.
    """
    output_path = _resolve_output(output_path, base_dir)
    if width_px < 1 or height_px < 1:
        raise ValueError("width_px and height_px must be >= 1")
    updates = final_state.updates()
    fig = plt.figure(figsize=(width_px / _DPI, height_px / _DPI), dpi=_DPI)
    fig.patch.set_facecolor(theme.background_color)
    ax = fig.add_subplot(projection="3d")
    bounds = _bounds_of(u.coord for u in updates)
    drawn = _draw_cells(ax, updates, bounds, theme=theme, include_hidden=include_hidden)
    ax.set_title(f"Target (step {final_state.step})")
    ax.legend(handles=_discipline_handles(theme), loc="upper left", fontsize=8)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=_DPI)
    plt.close(fig)
    logger.info("Wrote target preview with %d cells to %s", drawn, output_path)
    return output_path


# ---------------------------------------------------------------------------
# render_frame
# ---------------------------------------------------------------------------


def render_frame(
    state: EngineState,
    output_path: Path,
    legend: Sequence[ActionDescription] | None = None,
    bounds: Bounds | None = None,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Render the visible cells of one engine state, with an optional step legend."""
    output_path = _resolve_output(output_path, base_dir)
    updates = [CellUpdate.from_cell(state.cells[c]) for c in sorted(state.cells)]
    fig = plt.figure(figsize=(10, 6))
    ax = fig.add_subplot(projection="3d")
    _draw_cells(ax, updates, bounds or _bounds_of(state.cells), theme=theme)
    last = max(0, state.step_count - 1)
    ax.set_title(f"Step {state.current_step} / {last}")
    if legend:
        fig.text(
            0.02,
            0.98,
            format_step_legend(state.current_step, legend),
            va="top",
            ha="left",
            family="monospace",
            fontsize=8,
        )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path


# ---------------------------------------------------------------------------
# render_placement_chart
# ---------------------------------------------------------------------------


def render_placement_chart(
    telemetry: PlacementTelemetry,
    output_path: Path,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Plot cumulative units placed per discipline against step."""
    output_path = _resolve_output(output_path, base_dir)
    fig, ax = plt.subplots(figsize=(8, 4.5))
    for discipline in DISCIPLINES:
        series = telemetry.series[discipline]
        if not series.steps:
            continue
        ax.step(
            series.steps,
            series.cumulative,
            where="post",
            color=theme.color_for(discipline),
            label=theme.label_for(discipline),
        )
    ax.set_xlabel("Step")
    ax.set_ylabel("Cumulative units placed")
    ax.set_ylim(0, max(1, telemetry.max_total) * 1.1)
    ax.set_title("Placements by discipline")
    if telemetry.recorded_steps:
        ax.legend(loc="upper left", fontsize=8)
    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path


# ---------------------------------------------------------------------------
# render_replay_animation
# ---------------------------------------------------------------------------


def render_replay_animation(
    engine: ReplayEngine,
    output_path: Path,
    fps: int | None = None,
    start: int = 0,
    stop: int | None = None,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Animate the episode from *start* to *stop* (inclusive) by stepping *engine*.

    The engine is returned to its original step afterwards.
    """
    output_path = _resolve_output(output_path, base_dir)
    episode = engine.episode
    if episode is None or engine.step_count == 0:
        raise ValueError("No episode loaded")
    fps = engine.navigator.steps_per_second if fps is None else fps
    if fps < 1:
        raise ValueError("fps must be >= 1")
    last = engine.step_count - 1
    first = engine.navigator.clamp(start)
    final = last if stop is None else engine.navigator.clamp(stop)
    if final < first:
        raise ValueError(f"stop ({final}) must not precede start ({first})")
    steps = list(range(first, final + 1))
    bounds = catalog_bounds(episode.catalog)
    original_step = engine.current_step

    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(projection="3d")

    def update(frame_index: int) -> tuple[Any, ...]:
        state = engine.seek(steps[frame_index])
        ax.cla()
        updates = [CellUpdate.from_cell(state.cells[c]) for c in sorted(state.cells)]
        _draw_cells(ax, updates, bounds, theme=theme)
        ax.set_title(f"Step {state.current_step} / {last}")
        return ()

    anim = animation.FuncAnimation(
        fig, update, frames=len(steps), interval=max(1, int(1000 / fps)), blit=False
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = output_path.suffix.lower()
    writer: animation.PillowWriter | animation.FFMpegWriter
    if suffix == ".gif":
        writer = animation.PillowWriter(fps=fps)
    else:
        writer = animation.FFMpegWriter(fps=fps)
    try:
        anim.save(output_path, writer=writer)
    finally:
        plt.close(fig)
        engine.seek(original_step)
    logger.info("Wrote %d-frame animation to %s", len(steps), output_path)
    return output_path
