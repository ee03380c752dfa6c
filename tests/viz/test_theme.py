"""Tests for sequence_replay.viz.theme."""

from __future__ import annotations

import pytest
from matplotlib.colors import is_color_like

from sequence_replay.config.constants import DISCIPLINES
from sequence_replay.viz.theme import DEFAULT_THEME, PAPER_THEME, get_theme


@pytest.mark.parametrize("theme", [DEFAULT_THEME, PAPER_THEME])
def test_every_discipline_has_a_color(theme: object) -> None:
    for discipline in DISCIPLINES:
        assert is_color_like(theme.color_for(discipline))  # type: ignore[attr-defined]


def test_get_theme_case_insensitive() -> None:
    assert get_theme("PAPER") is PAPER_THEME


def test_get_theme_unknown() -> None:
    with pytest.raises(ValueError, match="available: default, paper"):
        get_theme("neon")


def test_unknown_discipline_falls_back() -> None:
    assert DEFAULT_THEME.color_for("welding") == DEFAULT_THEME.untouched_cell_color
    assert DEFAULT_THEME.label_for("cable_tray") == "Cable Tray"
