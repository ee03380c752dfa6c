"""Output contracts for render and telemetry consumers of the engine.

The engine never assumes a rendering technology. It pushes
:class:`CellUpdate` records to a :class:`RenderSink` and per-step
placement totals to a :class:`TelemetrySink`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from sequence_replay.domain.catalog import Coordinate, Requirement
from sequence_replay.domain.cells import CellState


@dataclass(frozen=True)
class CellUpdate:
    """Render-facing view of one cell."""

    coord: Coordinate
    counts: dict[str, int]  # discipline display order
    requirements: dict[str, Requirement]
    completion: float
    visible: bool

    @classmethod
    def from_cell(cls, cell: CellState) -> CellUpdate:
        return cls(
            coord=cell.coord,
            counts=cell.ordered_counts(),
            requirements=dict(cell.requirements),
            completion=cell.completion,
            visible=cell.visible,
        )

    def describe(self) -> str:
        """Multi-line hover summary: coordinate, overall completion, done/need per discipline."""
        x, y, z = self.coord
        lines = [f"({x},{y},{z}) overall {self.completion * 100:.1f}%"]
        for discipline, done in self.counts.items():
            need = self.requirements.get(discipline)
            suffix = "" if need is None else f" / {need}"
            lines.append(f"{discipline}: {done}{suffix}")
        if not self.counts:
            lines.append("no work")
        return "\n".join(lines)


class RenderSink(Protocol):
    def reset(self) -> None:
        """Drop every cell; a full rebuild follows."""

    def update_cell(self, update: CellUpdate) -> None:
        """Create or replace the representation of ``update.coord``."""


class TelemetrySink(Protocol):
    def reset(self) -> None:
        """Forget all accumulated totals (new episode)."""

    def record_step_totals(self, step: int, totals: Mapping[str, int]) -> None:
        """Accumulate units placed per discipline during *step*."""


@dataclass
class SceneBuffer:
    """In-memory render sink holding the latest update per coordinate."""

    cells: dict[Coordinate, CellUpdate] = field(default_factory=dict)
    resets: int = 0

    def reset(self) -> None:
        self.cells.clear()
        self.resets += 1

    def update_cell(self, update: CellUpdate) -> None:
        self.cells[update.coord] = update

    def visible_cells(self) -> list[CellUpdate]:
        return [self.cells[coord] for coord in sorted(self.cells) if self.cells[coord].visible]
