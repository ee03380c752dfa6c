"""Cumulative per-discipline placement telemetry.

Each step is counted at most once per episode even when the navigator
replays it again after a backwards seek, so the series reflect work
placed over the course of playback rather than over rebuilds.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import pyarrow as pa

from sequence_replay.config.constants import DISCIPLINES
from sequence_replay.io.schemas import STEP_TOTALS_SCHEMA


@dataclass
class DisciplineSeries:
    """Cumulative placement series for one discipline."""

    discipline: str
    total: int = 0
    steps: list[int] = field(default_factory=list)
    cumulative: list[int] = field(default_factory=list)
    placed: list[int] = field(default_factory=list)


class PlacementTelemetry:
    """Telemetry sink accumulating step totals into per-discipline series."""

    def __init__(self) -> None:
        self.series: dict[str, DisciplineSeries] = {}
        self._seen: set[int] = set()
        self.reset()

    def reset(self, clear_seen: bool = True) -> None:
        self.series = {d: DisciplineSeries(discipline=d) for d in DISCIPLINES}
        if clear_seen:
            self._seen.clear()

    @property
    def max_total(self) -> int:
        return max((s.total for s in self.series.values()), default=0)

    @property
    def recorded_steps(self) -> list[int]:
        return sorted(self._seen)

    def record_step_totals(self, step: int, totals: Mapping[str, int]) -> None:
        if step in self._seen:
            return
        self._seen.add(step)
        for discipline in DISCIPLINES:
            increment = int(totals.get(discipline, 0))
            series = self.series[discipline]
            series.total += increment
            series.steps.append(step)
            series.placed.append(increment)
            series.cumulative.append(series.total)

    def totals(self) -> dict[str, int]:
        return {d: s.total for d, s in self.series.items()}

    def to_table(self) -> pa.Table:
        """One row per (recorded step, discipline), in recording order."""
        columns: dict[str, list[object]] = {name: [] for name in STEP_TOTALS_SCHEMA.names}
        for discipline in DISCIPLINES:
            series = self.series[discipline]
            for step, placed, cumulative in zip(
                series.steps, series.placed, series.cumulative, strict=True
            ):
                columns["step"].append(step)
                columns["discipline"].append(discipline)
                columns["placed"].append(placed)
                columns["cumulative"].append(cumulative)
        table = pa.Table.from_pydict(columns, schema=STEP_TOTALS_SCHEMA)
        return table.sort_by([("step", "ascending")])
