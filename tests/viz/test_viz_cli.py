"""Tests for viz/cli.py: argument parsing and subcommand dispatch."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pyarrow.parquet as pq
import pytest

from sequence_replay.viz.cli import _parse_cell, main


@pytest.fixture
def episode_dir(tmp_path: Path, actions_text: str, valid_text: str) -> Path:
    (tmp_path / "actions.txt").write_text(actions_text, encoding="utf-8")
    (tmp_path / "valid.txt").write_text(valid_text, encoding="utf-8")
    return tmp_path


def _argv(command: str, base: Path, *extra: str) -> list[str]:
    return [
        "sequence-replay",
        command,
        "--actions",
        "actions.txt",
        "--valid",
        "valid.txt",
        "--base-dir",
        str(base),
        *extra,
    ]


def test_parse_cell_valid() -> None:
    assert _parse_cell("1, 2,3") == (1, 2, 3)


@pytest.mark.parametrize("raw", ["1,2", "a,b,c", "1,2,3,4"])
def test_parse_cell_invalid(raw: str) -> None:
    with pytest.raises(ValueError, match="Expected"):
        _parse_cell(raw)


def test_main_no_subcommand_exits() -> None:
    with patch.object(sys, "argv", ["sequence-replay"]):
        with pytest.raises(SystemExit):
            main()


def test_main_unknown_subcommand_exits() -> None:
    with patch.object(sys, "argv", ["sequence-replay", "does-not-exist"]):
        with pytest.raises(SystemExit):
            main()


def test_main_unknown_theme_exits(episode_dir: Path) -> None:
    argv = _argv("inspect", episode_dir)
    argv[1:1] = ["--theme", "neon"]
    with patch.object(sys, "argv", argv):
        with pytest.raises(SystemExit):
            main()


def test_inspect_prints_summary(episode_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch.object(sys, "argv", _argv("inspect", episode_dir, "--cell", "5,0,0")):
        main()
    out = capsys.readouterr().out
    assert "Steps: 4" in out
    assert "Step 3 / 3" in out
    assert "Actions @ step 3" in out
    assert "piping: 2 / 3" in out


def test_inspect_reports_slice(episode_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    argv = _argv("inspect", episode_dir, "--step", "1", "--slice", "x>4")
    with patch.object(sys, "argv", argv):
        main()
    out = capsys.readouterr().out
    assert "Cells: 2 (1 visible)" in out
    assert "Slice: x>4" in out


def test_malformed_episode_exits(tmp_path: Path, valid_text: str) -> None:
    (tmp_path / "actions.txt").write_text("[[0,0,0,0,0,0,0]]", encoding="utf-8")
    (tmp_path / "valid.txt").write_text(valid_text, encoding="utf-8")
    with patch.object(sys, "argv", _argv("inspect", tmp_path)):
        with pytest.raises(SystemExit) as exc_info:
            main()
    assert exc_info.value.code == 2


def test_bad_slice_exits(episode_dir: Path) -> None:
    with patch.object(sys, "argv", _argv("inspect", episode_dir, "--slice", "os.system")):
        with pytest.raises(SystemExit):
            main()


def test_preview_dispatches(episode_dir: Path) -> None:
    argv = _argv("preview", episode_dir, "--output", "target.png")
    with patch.object(sys, "argv", argv):
        with patch("sequence_replay.viz.cli.render_target_preview") as mock_render:
            main()
            mock_render.assert_called_once()
            final_state = mock_render.call_args.args[0]
            assert final_state.step == 3
            assert mock_render.call_args.kwargs["include_hidden"] is True


def test_frame_dispatches(episode_dir: Path) -> None:
    argv = _argv("frame", episode_dir, "--step", "2", "--output", "frame.png")
    with patch.object(sys, "argv", argv):
        with patch("sequence_replay.viz.cli.render_frame") as mock_render:
            main()
            state = mock_render.call_args.args[0]
            assert state.current_step == 2
            assert len(mock_render.call_args.kwargs["legend"]) == 8
            assert mock_render.call_args.kwargs["bounds"] == ((0, 6), (0, 1), (0, 1))


def test_chart_dispatches_with_full_telemetry(episode_dir: Path) -> None:
    argv = _argv("chart", episode_dir, "--output", "chart.png")
    with patch.object(sys, "argv", argv):
        with patch("sequence_replay.viz.cli.render_placement_chart") as mock_render:
            main()
            telemetry = mock_render.call_args.args[0]
            assert telemetry.recorded_steps == [0, 1, 2, 3]


def test_animate_dispatches(episode_dir: Path) -> None:
    argv = _argv("animate", episode_dir, "--output", "replay.gif", "--fps", "4")
    with patch.object(sys, "argv", argv):
        with patch("sequence_replay.viz.cli.render_replay_animation") as mock_render:
            main()
            mock_render.assert_called_once()
            assert mock_render.call_args.kwargs["fps"] == 4


def test_export_writes_final_snapshot(episode_dir: Path) -> None:
    with patch.object(sys, "argv", _argv("export", episode_dir, "--output", "out/final.parquet")):
        main()
    table = pq.read_table(episode_dir / "out" / "final.parquet")
    assert table.num_rows == 4
    assert set(table.column("step").to_pylist()) == {3}


def test_export_at_step(episode_dir: Path) -> None:
    argv = _argv("export", episode_dir, "--step", "0", "--output", "s0.parquet")
    with patch.object(sys, "argv", argv):
        main()
    rows = pq.read_table(episode_dir / "s0.parquet").to_pylist()
    assert [(r["x"], r["discipline"]) for r in rows] == [(0, "piling"), (5, "piping")]


def test_export_rejects_output_outside_base(episode_dir: Path) -> None:
    argv = _argv("export", episode_dir, "--output", "../escape.parquet")
    with patch.object(sys, "argv", argv):
        with pytest.raises(ValueError, match="escapes base_dir"):
            main()
