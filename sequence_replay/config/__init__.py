"""Configuration layer: constants and typed config dataclasses."""

from sequence_replay.config.constants import (
    COMPLETION_SHADE_DEPTH,
    COORDINATE_DIMS,
    DEFAULT_STEPS_PER_SECOND,
    DISCIPLINES,
    MAX_STEPS_PER_SECOND,
    MIN_STEPS_PER_SECOND,
    N_DISCIPLINES,
    PREVIEW_HEIGHT_PX,
    PREVIEW_WIDTH_PX,
)
from sequence_replay.config.types import PlaybackConfig, ReplayConfig, clamp_cadence

__all__ = [
    "COMPLETION_SHADE_DEPTH",
    "COORDINATE_DIMS",
    "DEFAULT_STEPS_PER_SECOND",
    "DISCIPLINES",
    "MAX_STEPS_PER_SECOND",
    "MIN_STEPS_PER_SECOND",
    "N_DISCIPLINES",
    "PREVIEW_HEIGHT_PX",
    "PREVIEW_WIDTH_PX",
    "PlaybackConfig",
    "ReplayConfig",
    "clamp_cadence",
]
