"""Tests for sequence_replay.config.types."""

from __future__ import annotations

import dataclasses

import pytest

from sequence_replay.config.types import PlaybackConfig, ReplayConfig, clamp_cadence


class TestClampCadence:
    def test_in_range_passes_through(self) -> None:
        assert clamp_cadence(12) == 12

    def test_clamps_low_and_high(self) -> None:
        assert clamp_cadence(0) == 1
        assert clamp_cadence(-5) == 1
        assert clamp_cadence(500) == 60

    def test_truncates_fractional(self) -> None:
        assert clamp_cadence(7.9) == 7


class TestPlaybackConfig:
    def test_default_is_six(self) -> None:
        assert PlaybackConfig().steps_per_second == 6

    def test_rejects_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="steps_per_second"):
            PlaybackConfig(steps_per_second=0)
        with pytest.raises(ValueError, match="steps_per_second"):
            PlaybackConfig(steps_per_second=61)

    def test_frozen(self) -> None:
        config = PlaybackConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.steps_per_second = 10  # type: ignore[misc]


def test_replay_config_defaults_to_lenient() -> None:
    config = ReplayConfig()
    assert config.strict_indices is False
    assert config.playback == PlaybackConfig()
