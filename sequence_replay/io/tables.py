"""Convert replay cell state into Arrow tables and Parquet exports."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from sequence_replay.domain.catalog import Coordinate, discipline_rank
from sequence_replay.domain.cells import CellState
from sequence_replay.io.schemas import CELL_SNAPSHOT_SCHEMA, SNAPSHOT_SCHEMA_VERSION


def cells_to_table(cells: Mapping[Coordinate, CellState], step: int) -> pa.Table:
    """Flatten *cells* into one row per (cell, discipline), sorted by coordinate."""
    columns: dict[str, list[object]] = {name: [] for name in CELL_SNAPSHOT_SCHEMA.names}
    for coord in sorted(cells):
        cell = cells[coord]
        completion = cell.completion
        for discipline, count in cell.ordered_counts().items():
            requirement = cell.requirements.get(discipline)
            columns["step"].append(step)
            columns["x"].append(coord[0])
            columns["y"].append(coord[1])
            columns["z"].append(coord[2])
            columns["discipline"].append(discipline)
            columns["discipline_rank"].append(discipline_rank(discipline))
            columns["count"].append(count)
            columns["requirement"].append(None if requirement is None else float(requirement))
            columns["completion"].append(completion)
            columns["visible"].append(cell.visible)
    return pa.Table.from_pydict(columns, schema=CELL_SNAPSHOT_SCHEMA)


def write_snapshot_parquet(table: pa.Table, output_path: Path) -> Path:
    """Write a snapshot table to *output_path*, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    metadata = dict(table.schema.metadata or {})
    metadata[b"schema_version"] = str(SNAPSHOT_SCHEMA_VERSION).encode()
    pq.write_table(table.replace_schema_metadata(metadata), output_path)
    return output_path
