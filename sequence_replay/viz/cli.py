from __future__ import annotations

import argparse
import logging
from pathlib import Path

from sequence_replay.config.types import ReplayConfig
from sequence_replay.errors import ReplayError
from sequence_replay.io.paths import read_episode_texts, resolve_within_base
from sequence_replay.io.tables import cells_to_table, write_snapshot_parquet
from sequence_replay.replay.engine import ReplayEngine
from sequence_replay.replay.telemetry import PlacementTelemetry
from sequence_replay.viz.render import (
    catalog_bounds,
    format_step_legend,
    render_frame,
    render_placement_chart,
    render_replay_animation,
    render_target_preview,
)
from sequence_replay.viz.theme import get_theme

logger = logging.getLogger(__name__)


def _add_episode_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--actions", type=Path, required=True, help="Recorded actions text file")
    p.add_argument("--valid", type=Path, required=True, help="Valid placements text file")
    p.add_argument("--base-dir", type=Path, default=Path("."))
    p.add_argument("--slice", type=str, default=None, help="Slice filter, e.g. 'x>4 && z<3'")
    p.add_argument(
        "--strict",
        action="store_true",
        help="Reject episodes containing out-of-range action indices",
    )


def _build_inspect_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("inspect", help="Print episode summary, step legend and anomalies")
    p.set_defaults(func=_handle_inspect)
    _add_episode_arguments(p)
    p.add_argument("--step", type=int, default=None)
    p.add_argument("--cell", type=_parse_cell, default=None, metavar="X,Y,Z")


def _build_preview_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("preview", help="Render the end-of-episode target as PNG")
    p.set_defaults(func=_handle_preview)
    _add_episode_arguments(p)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--visible-only", action="store_true")


def _build_frame_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("frame", help="Render the cell state at one step")
    p.set_defaults(func=_handle_frame)
    _add_episode_arguments(p)
    p.add_argument("--step", type=int, default=0)
    p.add_argument("--output", type=Path, required=True)


def _build_chart_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("chart", help="Plot cumulative placements per discipline")
    p.set_defaults(func=_handle_chart)
    _add_episode_arguments(p)
    p.add_argument("--step", type=int, default=None, help="Last step to include")
    p.add_argument("--output", type=Path, required=True)


def _build_animate_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("animate", help="Render an animation of the episode")
    p.set_defaults(func=_handle_animate)
    _add_episode_arguments(p)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--fps", type=int, default=None)
    p.add_argument("--start", type=int, default=0)
    p.add_argument("--stop", type=int, default=None)


def _build_export_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("export", help="Export a cell snapshot as Parquet")
    p.set_defaults(func=_handle_export)
    _add_episode_arguments(p)
    p.add_argument("--step", type=int, default=None, help="Defaults to the final state")
    p.add_argument("--output", type=Path, required=True)


def _parse_cell(raw: str) -> tuple[int, int, int]:
    parts = raw.split(",")
    if len(parts) != 3:
        raise ValueError(f"Expected X,Y,Z format, got: {raw}")
    try:
        x, y, z = (int(part.strip()) for part in parts)
    except ValueError as exc:
        raise ValueError(f"Expected integer coordinates, got: {raw}") from exc
    return (x, y, z)


def _load_engine(
    args: argparse.Namespace, telemetry: PlacementTelemetry | None = None
) -> ReplayEngine:
    base_dir = Path(args.base_dir).resolve()
    actions_path = resolve_within_base(args.actions, base_dir)
    valid_path = resolve_within_base(args.valid, base_dir)
    actions_text, valid_text = read_episode_texts(actions_path, valid_path)

    config = ReplayConfig(strict_indices=args.strict)
    engine = ReplayEngine(config=config, telemetry_sink=telemetry)
    engine.load_episode(actions_text, valid_text)
    if args.slice:
        engine.set_slice_filter(args.slice)
    return engine


def _handle_inspect(args: argparse.Namespace) -> None:
    engine = _load_engine(args)
    step = engine.step_count - 1 if args.step is None else args.step
    state = engine.seek(step)
    print(f"Steps: {state.step_count}")
    print(f"Step {state.current_step} / {state.step_count - 1}")
    print(f"Cells: {len(state.cells)} ({len(state.visible_cells)} visible)")
    if state.slice_expression:
        print(f"Slice: {state.slice_expression}")
    print(format_step_legend(state.current_step, engine.describe_step()))
    if state.anomalies:
        print(f"Anomalies ({len(state.anomalies)}):")
        for anomaly in state.anomalies:
            print(f"  {anomaly.describe()}")
    if args.cell is not None:
        summary = engine.cell_summary(args.cell)
        x, y, z = args.cell
        print(summary.describe() if summary is not None else f"({x},{y},{z}) no work")


def _handle_preview(args: argparse.Namespace) -> None:
    engine = _load_engine(args)
    render_target_preview(
        engine.compute_final_state(),
        output_path=args.output,
        base_dir=args.base_dir,
        include_hidden=not args.visible_only,
        theme=args.theme_obj,
    )


def _handle_frame(args: argparse.Namespace) -> None:
    engine = _load_engine(args)
    state = engine.seek(args.step)
    render_frame(
        state,
        output_path=args.output,
        legend=engine.describe_step(),
        bounds=catalog_bounds(engine.episode.catalog) if engine.episode is not None else None,
        base_dir=args.base_dir,
        theme=args.theme_obj,
    )


def _handle_chart(args: argparse.Namespace) -> None:
    telemetry = PlacementTelemetry()
    engine = _load_engine(args, telemetry=telemetry)
    engine.seek(engine.step_count - 1 if args.step is None else args.step)
    render_placement_chart(
        telemetry,
        output_path=args.output,
        base_dir=args.base_dir,
        theme=args.theme_obj,
    )


def _handle_animate(args: argparse.Namespace) -> None:
    engine = _load_engine(args)
    render_replay_animation(
        engine,
        output_path=args.output,
        fps=args.fps,
        start=args.start,
        stop=args.stop,
        base_dir=args.base_dir,
        theme=args.theme_obj,
    )


def _handle_export(args: argparse.Namespace) -> None:
    engine = _load_engine(args)
    if args.step is None:
        final = engine.compute_final_state()
        cells, step = final.cells, final.step
    else:
        state = engine.seek(args.step)
        cells, step = state.cells, state.current_step
    base_dir = Path(args.base_dir).resolve()
    output_path = resolve_within_base(args.output, base_dir)
    write_snapshot_parquet(cells_to_table(cells, step), output_path)
    logger.info("Exported %d cells at step %d to %s", len(cells), step, output_path)


def main() -> None:
    """CLI entrypoint with subcommands."""
    parser = argparse.ArgumentParser(description="Replay construction-sequencing episodes")
    parser.add_argument(
        "--theme",
        type=str,
        default="default",
        help="Theme preset name (default, paper)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    _build_inspect_parser(sub)
    _build_preview_parser(sub)
    _build_frame_parser(sub)
    _build_chart_parser(sub)
    _build_animate_parser(sub)
    _build_export_parser(sub)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.theme_obj = get_theme(args.theme)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        args.func(args)
    except ReplayError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
