"""Replay engine: the navigation surface over one loaded episode.

The engine owns a catalog, an action matrix, a :class:`CellStateAggregator`
and a :class:`TimelineNavigator`. Navigation requests move the pointer and
reconcile cell state: a step to ``current + 1`` is applied incrementally,
every other jump is a full rebuild. Each reconciliation pushes cell updates
to the render sink and step totals to the telemetry sink.

Engines hold no module-level state, so independent instances may coexist.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sequence_replay.config.types import ReplayConfig
from sequence_replay.domain.actions import ActionMatrix, normalize_actions, validate_indices
from sequence_replay.domain.catalog import Catalog, Coordinate, normalize_catalog
from sequence_replay.domain.cells import CellMap, CellState, CellStateAggregator
from sequence_replay.domain.decoder import (
    ActionDescription,
    DecodeAnomaly,
    DecodedStep,
    describe_step as describe_row,
)
from sequence_replay.domain.navigator import TimelineNavigator
from sequence_replay.domain.slice_filter import SlicePredicate, compile_slice_filter
from sequence_replay.errors import SliceFilterError
from sequence_replay.io.parsing import parse_recorded_actions_text, parse_valid_placements_text
from sequence_replay.replay.sinks import CellUpdate, RenderSink, TelemetrySink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Episode:
    """Loaded catalog and recorded actions."""

    catalog: Catalog
    actions: ActionMatrix

    @property
    def step_count(self) -> int:
        return int(self.actions.shape[0])


@dataclass(frozen=True)
class EngineState:
    """Snapshot returned by :meth:`ReplayEngine.get_state`.

    ``cells`` holds copies; mutating them never affects the engine.
    """

    current_step: int
    step_count: int
    cells: CellMap
    playing: bool
    anomalies: tuple[DecodeAnomaly, ...] = ()
    slice_expression: str | None = None

    @property
    def visible_cells(self) -> list[CellState]:
        return [self.cells[c] for c in sorted(self.cells) if self.cells[c].visible]


@dataclass(frozen=True)
class FinalState:
    """Cell state after the last step, independent of the navigator position."""

    step: int
    cells: CellMap = field(default_factory=dict)

    def updates(self) -> list[CellUpdate]:
        return [CellUpdate.from_cell(self.cells[c]) for c in sorted(self.cells)]


class ReplayEngine:
    """Deterministic replay of a construction-sequencing episode."""

    def __init__(
        self,
        config: ReplayConfig | None = None,
        render_sink: RenderSink | None = None,
        telemetry_sink: TelemetrySink | None = None,
    ) -> None:
        self.config = config or ReplayConfig()
        self.render_sink = render_sink
        self.telemetry_sink = telemetry_sink
        self.navigator = TimelineNavigator(0, self.config.playback.steps_per_second)
        self._episode: Episode | None = None
        self._aggregator: CellStateAggregator | None = None
        self._slice_expression: str | None = None
        self._slice_predicate: SlicePredicate | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def episode(self) -> Episode | None:
        return self._episode

    @property
    def step_count(self) -> int:
        return self.navigator.step_count

    @property
    def current_step(self) -> int:
        return self.navigator.current_step

    @property
    def playing(self) -> bool:
        return self.navigator.playing

    @property
    def slice_expression(self) -> str | None:
        return self._slice_expression

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_episode(self, actions_text: str, catalog_text: str) -> EngineState:
        """Parse both texts and install the episode, replacing any prior one.

        Raises :exc:`~sequence_replay.errors.EpisodeParseError` on malformed
        input; the previously loaded episode is then left untouched.
        """
        actions = parse_recorded_actions_text(actions_text)
        catalog = parse_valid_placements_text(catalog_text)
        return self._install(catalog, actions)

    def load_episode_data(self, actions: object, catalog: object) -> EngineState:
        """Install an episode from already-structured data."""
        matrix = normalize_actions(actions)
        normalized = normalize_catalog(catalog)
        return self._install(normalized, matrix)

    def _install(self, catalog: Catalog, actions: ActionMatrix) -> EngineState:
        if self.config.strict_indices:
            validate_indices(actions, catalog)
        aggregator = CellStateAggregator(catalog, actions)
        decoded_steps = aggregator.rebuild_through(0)

        self._episode = Episode(catalog=catalog, actions=actions)
        self._aggregator = aggregator
        self.navigator.reset(aggregator.step_count)
        if self.telemetry_sink is not None:
            self.telemetry_sink.reset()
        self._publish_rebuild(decoded_steps)
        logger.info(
            "Loaded episode: %d steps, %d catalog placements",
            aggregator.step_count,
            sum(len(d) for d in catalog),
        )
        return self.get_state()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def seek(self, step: int) -> EngineState:
        """Move to *step* (clamped) and reconcile cell state."""
        target = self.navigator.seek(step)
        if target is not None:
            self._reconcile(target)
        return self.get_state()

    def advance(self) -> EngineState:
        """Move one step forward; at the final step playback pauses instead."""
        target = self.navigator.advance()
        if target is not None:
            self._reconcile(target)
        return self.get_state()

    def advance_if_due(self, now: float) -> int | None:
        """Cadence driver tick; returns the new step when one was applied."""
        target = self.navigator.advance_if_due(now)
        if target is not None:
            self._reconcile(target)
        return target

    def play(self) -> None:
        self.navigator.play()

    def pause(self) -> None:
        self.navigator.pause()

    def toggle_play(self) -> bool:
        return self.navigator.toggle()

    def set_cadence(self, steps_per_second: float) -> int:
        """Set auto-advance cadence; returns the clamped steps-per-second."""
        return self.navigator.set_cadence(steps_per_second)

    def _reconcile(self, target: int) -> None:
        aggregator = self._aggregator
        if aggregator is None:
            return
        applied = aggregator.applied_through
        if applied is not None and target == applied:
            return
        if applied is not None and target == applied + 1:
            decoded, touched = aggregator.apply_step(target)
            self._refresh_visibility(aggregator.cells[c] for c in touched)
            self._emit(touched)
            self._record_totals([decoded])
            return
        self._publish_rebuild(aggregator.rebuild_through(target))

    # ------------------------------------------------------------------
    # Slice filter
    # ------------------------------------------------------------------

    def set_slice_filter(self, expression: str) -> EngineState:
        """Install a slice filter; a blank expression clears it.

        Raises :exc:`~sequence_replay.errors.SliceFilterError` when the
        expression is rejected, leaving the prior filter installed.
        """
        predicate = compile_slice_filter(expression)
        if predicate is None:
            return self.clear_slice_filter()
        cells = self._aggregator.cells if self._aggregator is not None else {}
        try:
            visibility = {coord: predicate(*coord) for coord in cells}
        except RecursionError as exc:
            raise SliceFilterError("Slice expression is nested too deeply") from exc

        self._slice_expression = expression.strip()
        self._slice_predicate = predicate
        for coord, visible in visibility.items():
            cells[coord].visible = visible
        self._emit(sorted(cells))
        return self.get_state()

    def clear_slice_filter(self) -> EngineState:
        self._slice_expression = None
        self._slice_predicate = None
        self._refresh_all_cells()
        return self.get_state()

    def is_visible(self, coord: Coordinate) -> bool:
        predicate = self._slice_predicate
        return predicate is None or predicate(*coord)

    def _refresh_visibility(self, cells: Iterable[CellState]) -> None:
        for cell in cells:
            cell.visible = self.is_visible(cell.coord)

    def _refresh_all_cells(self) -> None:
        if self._aggregator is None:
            return
        cells = self._aggregator.cells
        self._refresh_visibility(cells.values())
        self._emit(sorted(cells))

    # ------------------------------------------------------------------
    # Sink output
    # ------------------------------------------------------------------

    def _publish_rebuild(self, decoded_steps: list[DecodedStep]) -> None:
        if self._aggregator is None:
            return
        cells = self._aggregator.cells
        self._refresh_visibility(cells.values())
        if self.render_sink is not None:
            self.render_sink.reset()
        self._emit(sorted(cells))
        self._record_totals(decoded_steps)

    def _emit(self, coords: Iterable[Coordinate]) -> None:
        if self.render_sink is None or self._aggregator is None:
            return
        cells = self._aggregator.cells
        for coord in coords:
            self.render_sink.update_cell(CellUpdate.from_cell(cells[coord]))

    def _record_totals(self, decoded_steps: Iterable[DecodedStep]) -> None:
        if self.telemetry_sink is None:
            return
        for decoded in decoded_steps:
            self.telemetry_sink.record_step_totals(decoded.step, decoded.totals())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_state(self) -> EngineState:
        aggregator = self._aggregator
        if aggregator is None:
            return EngineState(
                current_step=0,
                step_count=0,
                cells={},
                playing=self.navigator.playing,
            )
        return EngineState(
            current_step=self.navigator.current_step,
            step_count=self.navigator.step_count,
            cells={coord: cell.copy() for coord, cell in aggregator.cells.items()},
            playing=self.navigator.playing,
            anomalies=aggregator.anomalies,
            slice_expression=self._slice_expression,
        )

    def compute_final_state(self) -> FinalState:
        """Full-episode cell state with the current slice filter applied.

        Computed into a detached map; the live state and navigator are not
        touched.
        """
        aggregator = self._aggregator
        if aggregator is None or aggregator.step_count == 0:
            return FinalState(step=-1)
        cells = aggregator.compute_final_state()
        self._refresh_visibility(cells.values())
        return FinalState(step=aggregator.step_count - 1, cells=cells)

    def describe_step(self, step: int | None = None) -> list[ActionDescription]:
        """Per-discipline legend for *step* (default: the current step)."""
        if self._episode is None or self.step_count == 0:
            return []
        index = self.navigator.clamp(self.current_step if step is None else step)
        return describe_row(self._episode.catalog, self._episode.actions[index])

    def cell_summary(self, coord: Coordinate) -> CellUpdate | None:
        """Current state of the cell at *coord*, or ``None`` if untouched."""
        if self._aggregator is None:
            return None
        cell = self._aggregator.cells.get(tuple(coord))  # type: ignore[arg-type]
        if cell is None:
            return None
        return CellUpdate.from_cell(cell)
