"""Arrow schema definitions for replay snapshots and placement telemetry.

Every table produced from engine state is built against one of these
schemas so that exports and charts work against the same column contracts.
"""

from __future__ import annotations

import pyarrow as pa

SNAPSHOT_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Cell snapshot: one row per (cell, discipline)
# ---------------------------------------------------------------------------

CELL_SNAPSHOT_SCHEMA = pa.schema(
    [
        ("step", pa.int64()),
        ("x", pa.int64()),
        ("y", pa.int64()),
        ("z", pa.int64()),
        ("discipline", pa.string()),
        ("discipline_rank", pa.int64()),
        ("count", pa.int64()),
        ("requirement", pa.float64()),
        ("completion", pa.float64()),
        ("visible", pa.bool_()),
    ]
)

# ---------------------------------------------------------------------------
# Placement telemetry: one row per (step, discipline)
# ---------------------------------------------------------------------------

STEP_TOTALS_SCHEMA = pa.schema(
    [
        ("step", pa.int64()),
        ("discipline", pa.string()),
        ("placed", pa.int64()),
        ("cumulative", pa.int64()),
    ]
)
