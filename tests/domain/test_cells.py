"""Tests for sequence_replay.domain.cells."""

from __future__ import annotations

import pytest

from sequence_replay.domain.actions import normalize_actions
from sequence_replay.domain.catalog import Catalog, normalize_catalog
from sequence_replay.domain.cells import CellState, CellStateAggregator


def _counts(cells: dict) -> dict:
    return {coord: dict(cell.counts) for coord, cell in cells.items()}


@pytest.fixture
def aggregator(catalog: Catalog, actions_rows: list[list[int]]) -> CellStateAggregator:
    return CellStateAggregator(catalog, normalize_actions(actions_rows))


class TestCellState:
    def test_add_unit_caches_first_requirement(self) -> None:
        cell = CellState(coord=(0, 0, 0))
        cell.add_unit("piping", 3)
        cell.add_unit("piping", 7)
        assert cell.counts == {"piping": 2}
        assert cell.requirements == {"piping": 3}

    def test_untracked_discipline_has_no_requirement(self) -> None:
        cell = CellState(coord=(0, 0, 0))
        cell.add_unit("piling", None)
        assert cell.requirements == {}
        assert cell.completion == 0.0

    def test_copy_is_detached(self) -> None:
        cell = CellState(coord=(0, 0, 0))
        cell.add_unit("piling", 2)
        clone = cell.copy()
        clone.add_unit("piling", 2)
        assert cell.counts == {"piling": 1}


class TestAggregator:
    def test_rebuild_through_first_step(self, aggregator: CellStateAggregator) -> None:
        aggregator.rebuild_through(0)
        assert _counts(aggregator.cells) == {(0, 0, 0): {"piling": 1}, (5, 0, 0): {"piping": 1}}
        assert aggregator.applied_through == 0

    def test_apply_step_matches_rebuild(self, aggregator: CellStateAggregator) -> None:
        aggregator.rebuild_through(0)
        aggregator.apply_step(1)
        incremental = _counts(aggregator.cells)
        aggregator.rebuild_through(1)
        assert _counts(aggregator.cells) == incremental

    def test_apply_step_reports_touched(self, aggregator: CellStateAggregator) -> None:
        aggregator.rebuild_through(0)
        decoded, touched = aggregator.apply_step(1)
        assert touched == [(0, 0, 0)]
        assert decoded.totals() == {"piling": 1, "structural_steel": 1}

    def test_final_state_equals_full_rebuild(self, aggregator: CellStateAggregator) -> None:
        aggregator.rebuild_through(1)
        final = aggregator.compute_final_state()
        # live state untouched
        assert aggregator.applied_through == 1
        aggregator.rebuild_through(aggregator.step_count - 1)
        assert _counts(final) == _counts(aggregator.cells)
        assert final is not aggregator.cells

    def test_accumulation_is_monotonic(self, aggregator: CellStateAggregator) -> None:
        previous: dict = {}
        for step in range(aggregator.step_count):
            aggregator.rebuild_through(step)
            current = _counts(aggregator.cells)
            for coord, counts in previous.items():
                for discipline, n in counts.items():
                    assert current[coord][discipline] >= n
            previous = current

    def test_noop_step_changes_nothing(self, aggregator: CellStateAggregator) -> None:
        aggregator.rebuild_through(2)
        before = _counts(aggregator.cells)
        decoded, touched = aggregator.apply_step(3)
        assert decoded.events == ()
        assert touched == []
        assert _counts(aggregator.cells) == before

    def test_final_completion(self, aggregator: CellStateAggregator) -> None:
        cells = aggregator.compute_final_state()
        assert cells[(0, 0, 0)].completion == 1.0
        assert cells[(1, 0, 0)].completion == 1.0
        assert cells[(5, 0, 0)].completion == pytest.approx(2 / 3)

    def test_rebuild_out_of_range_raises(self, aggregator: CellStateAggregator) -> None:
        with pytest.raises(IndexError):
            aggregator.rebuild_through(4)
        with pytest.raises(IndexError):
            aggregator.apply_step(-1)

    def test_anomalies_collected_in_step_order(self, catalog: Catalog) -> None:
        actions = normalize_actions([[3, 1, 1, 0, 0, 0, 0, 0], [2, 5, 1, 0, 0, 0, 0, 0]])
        aggregator = CellStateAggregator(catalog, actions)
        aggregator.rebuild_through(1)
        assert [(a.step, a.discipline) for a in aggregator.anomalies] == [
            (0, "piling"),
            (1, "structural_steel"),
        ]
        assert aggregator.cells == {}

    def test_clear(self, aggregator: CellStateAggregator) -> None:
        aggregator.rebuild_through(2)
        aggregator.clear()
        assert aggregator.cells == {}
        assert aggregator.applied_through is None


def test_requirement_clamp_sequence() -> None:
    lists: list[list[object]] = [[] for _ in range(8)]
    lists[2] = [[[2, 2, 2], 3]]
    catalog = normalize_catalog(lists)
    rows = [[0, 0, 0, 0, 0, 0, 0, 0] for _ in range(4)]
    aggregator = CellStateAggregator(catalog, normalize_actions(rows))
    ratios = []
    for step in range(4):
        aggregator.rebuild_through(step)
        ratios.append(aggregator.cells[(2, 2, 2)].completion)
    assert ratios[1] == pytest.approx(2 / 3)
    assert ratios[2] == 1.0
    assert ratios[3] == 1.0
    assert aggregator.cells[(2, 2, 2)].counts == {"piping": 4}
