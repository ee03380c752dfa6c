"""Timeline navigator: step pointer, clamped seeking, and fixed-cadence playback."""

from __future__ import annotations

from enum import Enum

from sequence_replay.config.constants import DEFAULT_STEPS_PER_SECOND
from sequence_replay.config.types import clamp_cadence


class PlaybackState(Enum):
    """Transport state of the navigator."""

    PAUSED = "paused"
    PLAYING = "playing"


class TimelineNavigator:
    """Tracks the current step of an episode with ``step_count`` steps.

    The navigator only moves the pointer; callers react to the returned
    target step (the engine rebuilds or applies cell state accordingly).
    """

    def __init__(
        self, step_count: int = 0, steps_per_second: int = DEFAULT_STEPS_PER_SECOND
    ) -> None:
        if step_count < 0:
            raise ValueError("step_count must be >= 0")
        self.step_count = step_count
        self.current_step = 0
        self.state = PlaybackState.PAUSED
        self.steps_per_second = clamp_cadence(steps_per_second)
        self._last_tick: float | None = None

    @property
    def playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def at_end(self) -> bool:
        return self.step_count == 0 or self.current_step >= self.step_count - 1

    @property
    def interval(self) -> float:
        """Seconds between auto-advance ticks at the current cadence."""
        return 1.0 / self.steps_per_second

    def reset(self, step_count: int) -> None:
        """Point at step 0 of a new episode, paused."""
        if step_count < 0:
            raise ValueError("step_count must be >= 0")
        self.step_count = step_count
        self.current_step = 0
        self.state = PlaybackState.PAUSED
        self._last_tick = None

    def clamp(self, step: int) -> int:
        return max(0, min(self.step_count - 1, int(step)))

    def seek(self, step: int) -> int | None:
        """Move to *step* clamped into range; ``None`` when there are no steps."""
        if self.step_count == 0:
            return None
        self.current_step = self.clamp(step)
        return self.current_step

    def play(self) -> None:
        self.state = PlaybackState.PLAYING
        self._last_tick = None

    def pause(self) -> None:
        self.state = PlaybackState.PAUSED

    def toggle(self) -> bool:
        """Flip play/pause; returns True when now playing."""
        if self.playing:
            self.pause()
        else:
            self.play()
        return self.playing

    def set_cadence(self, steps_per_second: float) -> int:
        self.steps_per_second = clamp_cadence(steps_per_second)
        return self.steps_per_second

    def advance(self) -> int | None:
        """Step forward once, or pause instead of running past the final step.

        Returns the new step, or ``None`` when no move happened.
        """
        if self.at_end:
            self.pause()
            return None
        return self.seek(self.current_step + 1)

    def advance_if_due(self, now: float) -> int | None:
        """Cadence driver hook: advance when playing and an interval has elapsed.

        *now* is a monotonic timestamp in seconds. The first call after
        :meth:`play` only starts the clock.
        """
        if not self.playing:
            return None
        if self._last_tick is None:
            self._last_tick = now
            return None
        if now - self._last_tick < self.interval:
            return None
        self._last_tick = now
        return self.advance()
