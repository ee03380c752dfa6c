"""Deterministic replay of construction-sequencing episodes.

A recorded episode is a ``step_count x 8`` matrix of per-discipline action
indices plus a catalog of valid placements per discipline. The engine
decodes each step into unit placements, accumulates per-cell work and
completion, and exposes a navigation surface (load, seek, play/pause,
cadence, slice filter) that drives pluggable render and telemetry sinks.
"""

from sequence_replay.config import PlaybackConfig, ReplayConfig
from sequence_replay.errors import (
    ActionsParseError,
    CatalogParseError,
    EpisodeParseError,
    ReplayError,
    SliceFilterError,
)
from sequence_replay.replay import (
    CellUpdate,
    EngineState,
    FinalState,
    PlacementTelemetry,
    ReplayEngine,
    SceneBuffer,
)

__all__ = [
    "ActionsParseError",
    "CatalogParseError",
    "CellUpdate",
    "EngineState",
    "EpisodeParseError",
    "FinalState",
    "PlacementTelemetry",
    "PlaybackConfig",
    "ReplayConfig",
    "ReplayEngine",
    "ReplayError",
    "SceneBuffer",
    "SliceFilterError",
]
