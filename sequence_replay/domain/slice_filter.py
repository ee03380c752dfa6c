"""Slice filter: compile a small coordinate expression into a predicate.

Grammar (lowest to highest precedence)::

    expr    := or
    or      := and ("||" and)*
    and     := eq ("&&" eq)*
    eq      := cmp (("==" | "!=") cmp)*
    cmp     := term (("<" | ">" | "<=" | ">=") term)*
    term    := factor (("+" | "-") factor)*
    factor  := unary (("*" | "/" | "%") unary)*
    unary   := ("!" | "-" | "+") unary | primary
    primary := NUMBER | "x" | "y" | "z" | "(" expr ")"

User text never reaches a general-purpose evaluator. It is whitelisted,
parsed into an AST and compiled once into nested closures. Arithmetic uses
IEEE float semantics, so division by zero produces inf/nan instead of
raising, and ``%`` keeps the sign of the dividend.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from sequence_replay.errors import SliceFilterError

logger = logging.getLogger(__name__)

SlicePredicate = Callable[[int, int, int], bool]
_Evaluator = Callable[[float, float, float], float | bool]

_MAX_OPERATORS = 256
"""Upper bound on operators per expression; keeps evaluation depth bounded."""

_ALLOWED_RE = re.compile(r"^[\sxyz0-9<>=!&|()%/*+.\-]+$")

_TOKEN_RE = re.compile(
    r"""
    (?P<NUMBER>\d+(?:\.\d*)?|\.\d+)
  | (?P<OP>==|!=|<=|>=|&&|\|\||[+\-*/%<>!()])
  | (?P<VAR>[xyz])
  | (?P<SKIP>\s+)
  | (?P<MISMATCH>.)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    pos: int


def tokenize(expression: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    while pos < len(expression):
        m = _TOKEN_RE.match(expression, pos)
        if m is None:
            raise SliceFilterError(f"Tokenizer stalled at position {pos}")
        kind = m.lastgroup or "MISMATCH"
        value = m.group(0)
        if kind == "MISMATCH":
            raise SliceFilterError(f"Unexpected character {value!r} at position {pos}")
        if kind != "SKIP":
            tokens.append(Token(kind, value, pos))
        pos = m.end()
    tokens.append(Token("EOF", "", pos))
    return tokens


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Expr:
    pass


@dataclass(frozen=True)
class Number(Expr):
    value: float


@dataclass(frozen=True)
class Var(Expr):
    name: str


@dataclass(frozen=True)
class Unary(Expr):
    op: str
    operand: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    op: str
    right: Expr


class Parser:
    """Recursive-descent parser over the slice-filter grammar."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.i = 0
        self.operators = 0

    def cur(self) -> Token:
        return self.tokens[self.i]

    def match(self, kind: str, *values: str) -> Token | None:
        t = self.cur()
        if t.kind != kind or (values and t.value not in values):
            return None
        self.i += 1
        return t

    def expect(self, kind: str, value: str) -> Token:
        t = self.match(kind, value)
        if t is None:
            got = self.cur()
            raise SliceFilterError(
                f"Expected {value!r} at position {got.pos}, got {got.value or 'end of input'!r}"
            )
        return t

    def _count_operator(self, t: Token) -> None:
        self.operators += 1
        if self.operators > _MAX_OPERATORS:
            raise SliceFilterError(
                f"Slice expression exceeds {_MAX_OPERATORS} operators at position {t.pos}"
            )

    def parse(self) -> Expr:
        expr = self.parse_or()
        end = self.cur()
        if end.kind != "EOF":
            raise SliceFilterError(f"Unexpected {end.value!r} at position {end.pos}")
        return expr

    def _binary_level(self, ops: tuple[str, ...], operand: Callable[[], Expr]) -> Expr:
        expr = operand()
        while (t := self.match("OP", *ops)) is not None:
            self._count_operator(t)
            expr = Binary(expr, t.value, operand())
        return expr

    def parse_or(self) -> Expr:
        return self._binary_level(("||",), self.parse_and)

    def parse_and(self) -> Expr:
        return self._binary_level(("&&",), self.parse_eq)

    def parse_eq(self) -> Expr:
        return self._binary_level(("==", "!="), self.parse_cmp)

    def parse_cmp(self) -> Expr:
        return self._binary_level(("<", ">", "<=", ">="), self.parse_term)

    def parse_term(self) -> Expr:
        return self._binary_level(("+", "-"), self.parse_factor)

    def parse_factor(self) -> Expr:
        return self._binary_level(("*", "/", "%"), self.parse_unary)

    def parse_unary(self) -> Expr:
        t = self.match("OP", "!", "-", "+")
        if t is not None:
            self._count_operator(t)
            return Unary(t.value, self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        t = self.cur()
        if self.match("NUMBER"):
            return Number(float(t.value))
        if self.match("VAR"):
            return Var(t.value)
        if self.match("OP", "("):
            expr = self.parse_or()
            self.expect("OP", ")")
            return expr
        raise SliceFilterError(
            f"Unexpected {t.value or 'end of input'!r} in expression at position {t.pos}"
        )


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _remainder(a: float, b: float) -> float:
    if b == 0 or math.isinf(a):
        return math.nan
    return math.fmod(a, b)


def _truthy(value: float | bool) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


_ARITHMETIC: dict[str, Callable[[float, float], float | bool]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "%": _remainder,
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
    "<=": lambda a, b: a <= b,
    ">=": lambda a, b: a >= b,
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
}


def _compile(node: Expr) -> _Evaluator:
    if isinstance(node, Number):
        value = node.value
        return lambda x, y, z: value
    if isinstance(node, Var):
        index = "xyz".index(node.name)
        return lambda x, y, z: (x, y, z)[index]
    if isinstance(node, Unary):
        operand = _compile(node.operand)
        if node.op == "!":
            return lambda x, y, z: not _truthy(operand(x, y, z))
        if node.op == "-":
            return lambda x, y, z: -operand(x, y, z)
        return lambda x, y, z: +operand(x, y, z)
    if isinstance(node, Binary):
        left = _compile(node.left)
        right = _compile(node.right)
        if node.op in ("&&", "||"):
            short_circuit_on = node.op == "||"

            def logical(x: float, y: float, z: float) -> float | bool:
                value = left(x, y, z)
                if _truthy(value) is short_circuit_on:
                    return value
                return right(x, y, z)

            return logical
        fn = _ARITHMETIC[node.op]
        return lambda x, y, z: fn(left(x, y, z), right(x, y, z))
    raise SliceFilterError(f"Unsupported expression node {type(node).__name__}")


def compile_slice_filter(expression: str) -> SlicePredicate | None:
    """Compile *expression* into a predicate over ``(x, y, z)``.

    Returns ``None`` for an empty or blank expression, meaning no filter.
    Raises :exc:`SliceFilterError` for disallowed characters, syntax errors,
    expressions with too many operators, or a predicate that fails when
    smoke-tested at the origin.
    """
    text = (expression or "").strip()
    if not text:
        return None
    if not _ALLOWED_RE.match(text):
        raise SliceFilterError(
            "Invalid slice expression. Allowed: x, y, z, numbers and operators."
        )
    try:
        tree = Parser(tokenize(text)).parse()
        evaluator = _compile(tree)
    except RecursionError as exc:
        raise SliceFilterError("Slice expression is nested too deeply") from exc

    def predicate(x: int, y: int, z: int) -> bool:
        return _truthy(evaluator(x, y, z))

    try:
        predicate(0, 0, 0)
    except (ArithmeticError, RecursionError, TypeError, ValueError) as exc:
        raise SliceFilterError(f"Could not evaluate slice expression: {exc}") from exc
    logger.debug("Compiled slice filter %r", text)
    return predicate
