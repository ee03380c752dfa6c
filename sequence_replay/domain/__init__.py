"""Domain layer: catalogs, action decoding, cell state, completion, slicing, navigation."""

from sequence_replay.domain.actions import ActionMatrix, normalize_actions, validate_indices
from sequence_replay.domain.catalog import (
    BareCoordinate,
    Catalog,
    Coordinate,
    CoordinateWithRequirement,
    DisciplineCatalog,
    Placement,
    discipline_rank,
    normalize_catalog,
)
from sequence_replay.domain.cells import CellMap, CellState, CellStateAggregator
from sequence_replay.domain.completion import (
    brightness_for_completion,
    completion_ratio,
    counts_to_mix,
    ordered_counts,
)
from sequence_replay.domain.decoder import (
    ActionDescription,
    ActionKind,
    DecodeAnomaly,
    DecodedStep,
    PlacementEvent,
    decode_step,
    describe_step,
)
from sequence_replay.domain.navigator import PlaybackState, TimelineNavigator
from sequence_replay.domain.slice_filter import SlicePredicate, compile_slice_filter

__all__ = [
    "ActionDescription",
    "ActionKind",
    "ActionMatrix",
    "BareCoordinate",
    "Catalog",
    "CellMap",
    "CellState",
    "CellStateAggregator",
    "Coordinate",
    "CoordinateWithRequirement",
    "DecodeAnomaly",
    "DecodedStep",
    "DisciplineCatalog",
    "Placement",
    "PlacementEvent",
    "PlaybackState",
    "SlicePredicate",
    "TimelineNavigator",
    "brightness_for_completion",
    "compile_slice_filter",
    "completion_ratio",
    "counts_to_mix",
    "decode_step",
    "describe_step",
    "discipline_rank",
    "normalize_actions",
    "normalize_catalog",
    "ordered_counts",
    "validate_indices",
]
