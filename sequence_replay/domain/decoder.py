"""Decode one recorded step into placement events.

Decoding a step is a pure function of the catalog and that step's row; it
never depends on earlier steps. Out-of-range indices are anomalies: they
are logged and skipped, and the rest of the row is still decoded.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from numbers import Real

from sequence_replay.domain.catalog import Catalog, Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementEvent:
    """One unit of work for *discipline* at *coord*."""

    step: int
    discipline: str
    coord: Coordinate


@dataclass(frozen=True)
class DecodeAnomaly:
    """Action index outside its discipline's catalog (excluding the no-op)."""

    step: int
    discipline: str
    index: int | float

    def describe(self) -> str:
        return f"Step {self.step}, {self.discipline}: idx {self.index} OOR"


@dataclass(frozen=True)
class DecodedStep:
    """Events and anomalies produced by a single step row."""

    step: int
    events: tuple[PlacementEvent, ...]
    anomalies: tuple[DecodeAnomaly, ...]

    def totals(self) -> dict[str, int]:
        """Units placed per discipline during this step (placing disciplines only)."""
        totals: dict[str, int] = {}
        for event in self.events:
            totals[event.discipline] = totals.get(event.discipline, 0) + 1
        return totals


def _finite(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def decode_step(catalog: Catalog, row: Sequence[object], step: int) -> DecodedStep:
    """Resolve every discipline entry of *row* against *catalog*."""
    events: list[PlacementEvent] = []
    anomalies: list[DecodeAnomaly] = []
    for position, disc_catalog in enumerate(catalog):
        value = row[position] if position < len(row) else None
        if not _finite(value):
            continue
        if value == disc_catalog.noop_index:
            continue
        if value < 0 or value >= len(disc_catalog) or value != int(value):  # type: ignore[operator]
            anomaly = DecodeAnomaly(
                step=step,
                discipline=disc_catalog.discipline,
                index=int(value) if value == int(value) else float(value),  # type: ignore[arg-type]
            )
            logger.warning(anomaly.describe())
            anomalies.append(anomaly)
            continue
        placement = disc_catalog.placements[int(value)]  # type: ignore[call-overload]
        events.append(
            PlacementEvent(step=step, discipline=disc_catalog.discipline, coord=placement.coord)
        )
    return DecodedStep(step=step, events=tuple(events), anomalies=tuple(anomalies))


# ---------------------------------------------------------------------------
# Step legend
# ---------------------------------------------------------------------------


class ActionKind(Enum):
    """How one discipline entry of a step row resolves."""

    MISSING = "missing"
    NOOP = "no-op"
    INVALID = "invalid"
    PLACEMENT = "placement"


@dataclass(frozen=True)
class ActionDescription:
    """Human-facing description of one discipline entry in a step row."""

    discipline: str
    kind: ActionKind
    index: int | None = None
    coord: Coordinate | None = None

    def label(self) -> str:
        if self.kind is ActionKind.PLACEMENT and self.coord is not None:
            x, y, z = self.coord
            return f"({x},{y},{z})"
        if self.kind is ActionKind.INVALID:
            return f"invalid idx {self.index}"
        return self.kind.value


def describe_step(catalog: Catalog, row: Sequence[object]) -> list[ActionDescription]:
    """Describe each discipline's action in *row*, in discipline order."""
    descriptions: list[ActionDescription] = []
    for position, disc_catalog in enumerate(catalog):
        name = disc_catalog.discipline
        value = row[position] if position < len(row) else None
        if not _finite(value):
            descriptions.append(ActionDescription(name, ActionKind.MISSING))
        elif value == disc_catalog.noop_index:
            descriptions.append(ActionDescription(name, ActionKind.NOOP, index=int(value)))  # type: ignore[call-overload]
        elif value < 0 or value >= len(disc_catalog) or value != int(value):  # type: ignore[operator]
            descriptions.append(ActionDescription(name, ActionKind.INVALID, index=int(value)))  # type: ignore[call-overload]
        else:
            index = int(value)  # type: ignore[call-overload]
            descriptions.append(
                ActionDescription(
                    name,
                    ActionKind.PLACEMENT,
                    index=index,
                    coord=disc_catalog.placements[index].coord,
                )
            )
    return descriptions
