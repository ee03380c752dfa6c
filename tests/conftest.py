from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from sequence_replay.domain.catalog import Catalog, normalize_catalog  # noqa: E402

# Disciplines: piling, structural_steel, piping, equipment,
# instrumentation, cable_tray, electrical, insulation.
# No-op indices: piling=2, structural_steel=1, piping=1, the rest 0.
VALID_TEXT = (
    "[[((0, 0, 0), 2), ((1, 0, 0), 1)], [(0, 0, 0)], [((5, 0, 0), 3)], "
    "[], [], [], [], []]"
)

ACTIONS_ROWS = [
    [0, 1, 0, 0, 0, 0, 0, 0],  # piling (0,0,0), piping (5,0,0)
    [0, 0, 1, 0, 0, 0, 0, 0],  # piling (0,0,0), steel (0,0,0)
    [1, 1, 0, 0, 0, 0, 0, 0],  # piling (1,0,0), piping (5,0,0)
    [2, 1, 1, 0, 0, 0, 0, 0],  # all no-op
]

ACTIONS_TEXT = (
    "array([[0, 1, 0, 0, 0, 0, 0, 0],\n"
    "       [0, 0, 1, 0, 0, 0, 0, 0],\n"
    "       [1, 1, 0, 0, 0, 0, 0, 0],\n"
    "       [2, 1, 1, 0, 0, 0, 0, 0]], dtype=int64)"
)

CATALOG_LISTS = [
    [[[0, 0, 0], 2], [[1, 0, 0], 1]],
    [[0, 0, 0]],
    [[[5, 0, 0], 3]],
    [],
    [],
    [],
    [],
    [],
]


@pytest.fixture
def valid_text() -> str:
    return VALID_TEXT


@pytest.fixture
def actions_text() -> str:
    return ACTIONS_TEXT


@pytest.fixture
def actions_rows() -> list[list[int]]:
    return [list(row) for row in ACTIONS_ROWS]


@pytest.fixture
def catalog() -> Catalog:
    return normalize_catalog(CATALOG_LISTS)
