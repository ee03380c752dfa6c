"""Tests for sequence_replay.domain.slice_filter."""

from __future__ import annotations

import pytest

from sequence_replay.domain.slice_filter import Parser, compile_slice_filter, tokenize
from sequence_replay.errors import SliceFilterError


def _visible(expression: str, coords: list[tuple[int, int, int]]) -> list[tuple[int, int, int]]:
    predicate = compile_slice_filter(expression)
    assert predicate is not None
    return [c for c in coords if predicate(*c)]


class TestCompile:
    def test_simple_comparison(self) -> None:
        assert _visible("x>4", [(3, 0, 0), (5, 0, 0)]) == [(5, 0, 0)]

    @pytest.mark.parametrize("expression", ["", "   ", None])
    def test_blank_means_no_filter(self, expression: str | None) -> None:
        assert compile_slice_filter(expression) is None  # type: ignore[arg-type]

    def test_boolean_connectives(self) -> None:
        coords = [(0, 0, 0), (1, 2, 3), (4, 4, 1)]
        assert _visible("x >= 1 && z < 3", coords) == [(4, 4, 1)]
        assert _visible("x == 0 || z == 3", coords) == [(0, 0, 0), (1, 2, 3)]
        assert _visible("!(x == 0)", coords) == [(1, 2, 3), (4, 4, 1)]

    def test_precedence(self) -> None:
        # && binds tighter than ||; * tighter than +
        assert _visible("x == 1 || y == 4 && z == 1", [(1, 0, 0), (0, 4, 0), (0, 4, 1)]) == [
            (1, 0, 0),
            (0, 4, 1),
        ]
        assert _visible("x + y * 2 == 5", [(1, 2, 0), (3, 1, 0), (6, 0, 0)]) == [
            (1, 2, 0),
            (3, 1, 0),
        ]

    def test_modulo_and_unary_minus(self) -> None:
        coords = [(-3, 0, 0), (-2, 0, 0), (2, 0, 0)]
        assert _visible("x % 2 == 0", coords) == [(-2, 0, 0), (2, 0, 0)]
        assert _visible("-x > 0", coords) == [(-3, 0, 0), (-2, 0, 0)]
        # remainder keeps the sign of the dividend
        assert _visible("x % 2 == -1", coords) == [(-3, 0, 0)]

    def test_division_by_zero_does_not_raise(self) -> None:
        assert _visible("x / y > 1", [(1, 0, 0), (0, 0, 0), (-1, 0, 0)]) == [(1, 0, 0)]
        assert _visible("x % y == 0", [(1, 0, 0)]) == []

    def test_numeric_expression_truthiness(self) -> None:
        assert _visible("x", [(0, 0, 0), (2, 0, 0)]) == [(2, 0, 0)]
        assert _visible("0.5", [(0, 0, 0)]) == [(0, 0, 0)]

    @pytest.mark.parametrize(
        "expression",
        ["__import__('os')", "a > 1", "x > 1; y", "lambda: 1", "x > 'a'", "x > 1 #"],
    )
    def test_rejects_characters_outside_whitelist(self, expression: str) -> None:
        with pytest.raises(SliceFilterError, match="Allowed"):
            compile_slice_filter(expression)

    @pytest.mark.parametrize("expression", ["x >", "(x > 1", "x > 1)", "x = 1", "x & y", "xy"])
    def test_rejects_syntax_errors(self, expression: str) -> None:
        with pytest.raises(SliceFilterError):
            compile_slice_filter(expression)

    def test_deep_nesting_rejected(self) -> None:
        with pytest.raises(SliceFilterError):
            compile_slice_filter("(" * 5000 + "x" + ")" * 5000)

    def test_long_operator_chain_rejected(self) -> None:
        with pytest.raises(SliceFilterError, match="256 operators"):
            compile_slice_filter("+".join(["x"] * 1000))

    def test_long_unary_chain_rejected(self) -> None:
        with pytest.raises(SliceFilterError, match="256 operators"):
            compile_slice_filter("-" * 300 + "x")

    def test_chain_at_operator_limit_compiles(self) -> None:
        predicate = compile_slice_filter("+".join(["x"] * 257))
        assert predicate is not None
        assert predicate(1, 0, 0)
        assert not predicate(0, 0, 0)


def test_tokenize_emits_eof() -> None:
    tokens = tokenize("x<=2.5")
    assert [(t.kind, t.value) for t in tokens] == [
        ("VAR", "x"),
        ("OP", "<="),
        ("NUMBER", "2.5"),
        ("EOF", ""),
    ]


def test_parser_reports_position() -> None:
    with pytest.raises(SliceFilterError, match="position 4"):
        Parser(tokenize("x > )")).parse()
