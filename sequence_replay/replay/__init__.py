"""Replay layer: the navigation engine and its render/telemetry sinks."""

from sequence_replay.replay.engine import EngineState, Episode, FinalState, ReplayEngine
from sequence_replay.replay.sinks import CellUpdate, RenderSink, SceneBuffer, TelemetrySink
from sequence_replay.replay.telemetry import DisciplineSeries, PlacementTelemetry

__all__ = [
    "CellUpdate",
    "DisciplineSeries",
    "EngineState",
    "Episode",
    "FinalState",
    "PlacementTelemetry",
    "RenderSink",
    "ReplayEngine",
    "SceneBuffer",
    "TelemetrySink",
]
