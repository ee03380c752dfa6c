"""I/O layer: episode text parsing, Arrow schemas/tables, and path helpers."""

from sequence_replay.io.parsing import (
    normalize_tuple_notation,
    parse_recorded_actions_text,
    parse_valid_placements_text,
    strip_array_decorations,
)
from sequence_replay.io.paths import read_episode_texts, resolve_within_base
from sequence_replay.io.schemas import (
    CELL_SNAPSHOT_SCHEMA,
    SNAPSHOT_SCHEMA_VERSION,
    STEP_TOTALS_SCHEMA,
)
from sequence_replay.io.tables import cells_to_table, write_snapshot_parquet

__all__ = [
    "CELL_SNAPSHOT_SCHEMA",
    "SNAPSHOT_SCHEMA_VERSION",
    "STEP_TOTALS_SCHEMA",
    "cells_to_table",
    "normalize_tuple_notation",
    "parse_recorded_actions_text",
    "parse_valid_placements_text",
    "read_episode_texts",
    "resolve_within_base",
    "strip_array_decorations",
    "write_snapshot_parquet",
]
