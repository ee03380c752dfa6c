"""Recorded action matrix: one row of 8 discipline indices per step."""

from __future__ import annotations

import math
from collections.abc import Sequence
from numbers import Integral, Real

import numpy as np

from sequence_replay.config.constants import DISCIPLINES, N_DISCIPLINES
from sequence_replay.domain.catalog import Catalog
from sequence_replay.errors import ActionsParseError

ActionMatrix = np.ndarray
"""Read-only ``(step_count, 8)`` int64 array of action indices."""

_INT64 = np.iinfo(np.int64)


def _is_row(value: object) -> bool:
    return isinstance(value, (np.ndarray, Sequence)) and not isinstance(value, str)


def normalize_actions(raw: object) -> ActionMatrix:
    """Validate a 2D array-like of action indices and freeze it.

    Every row must carry exactly one entry per discipline; a single bad row
    rejects the whole dataset. Numeric entries are truncated toward zero.
    """
    if not _is_row(raw) or len(raw) == 0:  # type: ignore[arg-type]
        raise ActionsParseError("recorded_actions: expected a 2D array (list of 8-length rows)")
    rows = list(raw)  # type: ignore[call-overload]
    if not _is_row(rows[0]):
        raise ActionsParseError("recorded_actions: expected a 2D array (list of 8-length rows)")
    if len(rows[0]) != N_DISCIPLINES:
        raise ActionsParseError(
            f"recorded_actions: inner length must be {N_DISCIPLINES} (got {len(rows[0])})"
        )

    matrix = np.empty((len(rows), N_DISCIPLINES), dtype=np.int64)
    for i, row in enumerate(rows):
        if not _is_row(row) or len(row) != N_DISCIPLINES:
            raise ActionsParseError(f"recorded_actions: row {i} is not length {N_DISCIPLINES}")
        for j, value in enumerate(row):
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
                raise ActionsParseError(f"recorded_actions: non-numeric at [{i}][{j}]")
            if isinstance(value, Integral):
                index = int(value)
            elif math.isfinite(value):
                index = math.trunc(value)
            else:
                raise ActionsParseError(f"recorded_actions: non-numeric at [{i}][{j}]")
            if not _INT64.min <= index <= _INT64.max:
                raise ActionsParseError(
                    f"recorded_actions: index out of int64 range at [{i}][{j}]"
                )
            matrix[i, j] = index
    matrix.setflags(write=False)
    return matrix


def validate_indices(actions: ActionMatrix, catalog: Catalog) -> None:
    """Reject any index outside ``[0, noop_index]`` (strict loading)."""
    for position, disc_catalog in enumerate(catalog):
        column = actions[:, position]
        bad = np.flatnonzero((column < 0) | (column > disc_catalog.noop_index))
        if bad.size:
            step = int(bad[0])
            raise ActionsParseError(
                f"recorded_actions: step {step}, {DISCIPLINES[position]}: "
                f"index {int(column[step])} out of range [0, {disc_catalog.noop_index}]"
            )
