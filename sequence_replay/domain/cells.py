"""Cell state aggregation: replay decoded steps into per-cell work counts.

Accumulation invariant: a step can only add units to a cell,
never remove them, and a (cell, discipline) requirement never changes once
recorded. Counts are commutative sums, so replay order only affects the
order in which anomalies are reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sequence_replay.domain.actions import ActionMatrix
from sequence_replay.domain.catalog import Catalog, Coordinate, Requirement
from sequence_replay.domain.completion import completion_ratio, ordered_counts
from sequence_replay.domain.decoder import DecodeAnomaly, DecodedStep, decode_step

logger = logging.getLogger(__name__)

CellMap = dict[Coordinate, "CellState"]


@dataclass
class CellState:
    """Accumulated work at one coordinate."""

    coord: Coordinate
    counts: dict[str, int] = field(default_factory=dict)
    requirements: dict[str, Requirement] = field(default_factory=dict)
    visible: bool = True

    def add_unit(self, discipline: str, requirement: Requirement | None) -> None:
        """Record one completed unit; cache the requirement on first sight."""
        self.counts[discipline] = self.counts.get(discipline, 0) + 1
        if requirement is not None and discipline not in self.requirements:
            self.requirements[discipline] = requirement

    @property
    def completion(self) -> float:
        return completion_ratio(self.counts, self.requirements)

    def ordered_counts(self) -> dict[str, int]:
        return ordered_counts(self.counts)

    def copy(self) -> CellState:
        return CellState(
            coord=self.coord,
            counts=dict(self.counts),
            requirements=dict(self.requirements),
            visible=self.visible,
        )


def _apply_decoded(cells: CellMap, catalog: Catalog, decoded: DecodedStep) -> list[Coordinate]:
    """Apply *decoded* events to *cells*; return touched coordinates in event order."""
    touched: list[Coordinate] = []
    for event in decoded.events:
        cell = cells.get(event.coord)
        if cell is None:
            cell = CellState(coord=event.coord)
            cells[event.coord] = cell
        requirement = catalog.by_name(event.discipline).requirement_for(event.coord)
        cell.add_unit(event.discipline, requirement)
        if event.coord not in touched:
            touched.append(event.coord)
    return touched


class CellStateAggregator:
    """Owns the live coordinate -> :class:`CellState` map for one episode."""

    def __init__(self, catalog: Catalog, actions: ActionMatrix) -> None:
        self.catalog = catalog
        self.actions = actions
        self._cells: CellMap = {}
        self._anomalies: list[DecodeAnomaly] = []
        self._applied_through: int | None = None

    @property
    def step_count(self) -> int:
        return int(self.actions.shape[0])

    @property
    def cells(self) -> CellMap:
        return self._cells

    @property
    def anomalies(self) -> tuple[DecodeAnomaly, ...]:
        """Anomalies reported while building the live state, in step order."""
        return tuple(self._anomalies)

    @property
    def applied_through(self) -> int | None:
        """Last step folded into the live state, or None when empty."""
        return self._applied_through

    def _check_step(self, step: int) -> None:
        if not 0 <= step < self.step_count:
            raise IndexError(f"step {step} outside [0, {self.step_count})")

    def decode(self, step: int) -> DecodedStep:
        self._check_step(step)
        return decode_step(self.catalog, self.actions[step], step)

    def apply_step(self, step: int) -> tuple[DecodedStep, list[Coordinate]]:
        """Decode *step* and fold its events into the live state."""
        decoded = self.decode(step)
        touched = _apply_decoded(self._cells, self.catalog, decoded)
        self._anomalies.extend(decoded.anomalies)
        self._applied_through = step
        return decoded, touched

    def _replay(self, target_step: int) -> tuple[CellMap, list[DecodeAnomaly], list[DecodedStep]]:
        cells: CellMap = {}
        anomalies: list[DecodeAnomaly] = []
        decoded_steps: list[DecodedStep] = []
        for step in range(target_step + 1):
            decoded = decode_step(self.catalog, self.actions[step], step)
            _apply_decoded(cells, self.catalog, decoded)
            anomalies.extend(decoded.anomalies)
            decoded_steps.append(decoded)
        return cells, anomalies, decoded_steps

    def rebuild_through(self, target_step: int) -> list[DecodedStep]:
        """Clear all state and replay steps ``0..target_step`` inclusive.

        The replay runs into a fresh map that replaces the live one only once
        it has completed.
        """
        self._check_step(target_step)
        cells, anomalies, decoded_steps = self._replay(target_step)
        self._cells = cells
        self._anomalies = anomalies
        self._applied_through = target_step
        logger.debug("Rebuilt %d cells through step %d", len(cells), target_step)
        return decoded_steps

    def compute_final_state(self) -> CellMap:
        """Replay the whole episode into a detached map; live state is untouched."""
        if self.step_count == 0:
            return {}
        cells, _, _ = self._replay(self.step_count - 1)
        return cells

    def clear(self) -> None:
        self._cells = {}
        self._anomalies = []
        self._applied_through = None
