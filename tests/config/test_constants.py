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


def test_disciplines_are_eight_unique_names_in_order() -> None:
    assert len(DISCIPLINES) == N_DISCIPLINES == 8
    assert len(set(DISCIPLINES)) == N_DISCIPLINES
    assert DISCIPLINES[0] == "piling"
    assert DISCIPLINES[-1] == "insulation"


def test_coordinates_are_three_dimensional() -> None:
    assert COORDINATE_DIMS == 3


def test_default_cadence_within_bounds() -> None:
    assert MIN_STEPS_PER_SECOND == 1
    assert MAX_STEPS_PER_SECOND == 60
    assert MIN_STEPS_PER_SECOND <= DEFAULT_STEPS_PER_SECOND <= MAX_STEPS_PER_SECOND


def test_shade_depth_keeps_brightness_positive() -> None:
    assert 0.0 < COMPLETION_SHADE_DEPTH < 1.0


def test_preview_size_is_positive() -> None:
    assert isinstance(PREVIEW_WIDTH_PX, int) and PREVIEW_WIDTH_PX > 0
    assert isinstance(PREVIEW_HEIGHT_PX, int) and PREVIEW_HEIGHT_PX > 0
