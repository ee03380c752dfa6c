"""Configuration dataclasses for the replay engine.

Frozen dataclasses validate themselves in ``__post_init__`` so that an
invalid configuration fails at construction rather than mid-replay.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sequence_replay.config.constants import (
    DEFAULT_STEPS_PER_SECOND,
    MAX_STEPS_PER_SECOND,
    MIN_STEPS_PER_SECOND,
)

__all__ = [
    "PlaybackConfig",
    "ReplayConfig",
    "clamp_cadence",
]


def clamp_cadence(steps_per_second: float) -> int:
    """Clamp a requested cadence into the supported steps-per-second range."""
    value = int(steps_per_second)
    return max(MIN_STEPS_PER_SECOND, min(MAX_STEPS_PER_SECOND, value))


@dataclass(frozen=True)
class PlaybackConfig:
    """Auto-advance settings for the timeline navigator."""

    steps_per_second: int = DEFAULT_STEPS_PER_SECOND

    def __post_init__(self) -> None:
        if not MIN_STEPS_PER_SECOND <= self.steps_per_second <= MAX_STEPS_PER_SECOND:
            raise ValueError(
                f"steps_per_second must be in [{MIN_STEPS_PER_SECOND}, {MAX_STEPS_PER_SECOND}]"
            )


@dataclass(frozen=True)
class ReplayConfig:
    """Top-level engine settings.

    ``strict_indices`` rejects an episode at load time when any action index
    falls outside ``[0, noop_index]`` for its discipline. The default keeps
    the lenient behaviour: the entry is skipped and reported as an anomaly.
    """

    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    strict_indices: bool = False
