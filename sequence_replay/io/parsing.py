"""Parse recorded-actions and valid-placement text into structured episode data.

Both inputs are numeric nested-array literals, typically pasted from a
numpy/Python session. Decorative wrappers are stripped with regular
expressions, and the remaining literal is evaluated with
:func:`ast.literal_eval`, which only builds containers and constants.
"""

from __future__ import annotations

import ast
import logging
import re

from sequence_replay.domain.actions import ActionMatrix, normalize_actions
from sequence_replay.domain.catalog import Catalog, normalize_catalog
from sequence_replay.errors import ActionsParseError, CatalogParseError

logger = logging.getLogger(__name__)

_NUMERIC_ARRAY_RE = re.compile(r"^[\s\[\],0-9.\-]+$")

# recorded actions: numpy repr decorations
_ARRAY_CALL_RE = re.compile(r"\barray\s*\(")
_DTYPE_RE = re.compile(r",\s*dtype\s*=\s*[^)]+")
_PAREN_ROW_RE = re.compile(r"\(\s*(\[[^\]]*\])\s*\)")
_OUTER_OPEN_RE = re.compile(r"^\(\s*")
_OUTER_CLOSE_RE = re.compile(r"\s*\)$")

# valid placements: tuple notation
_TUPLE_COORD_RE = re.compile(r"\(\s*(-?\d+)\s*,\s*(-?\d+)\s*,\s*(-?\d+)\s*\)")
_TUPLE_PAIR_RE = re.compile(r"\(\s*(\[[^\]]+\])\s*,\s*(-?\d+(?:\.\d+)?)\s*\)")


def strip_array_decorations(text: str) -> str:
    """Remove ``array(...)`` wrappers and ``dtype=`` annotations from *text*."""
    text = text.strip()
    text = _ARRAY_CALL_RE.sub("(", text)
    text = _DTYPE_RE.sub("", text)
    text = _PAREN_ROW_RE.sub(r"\1", text)
    if re.match(r"^\(\s*\[", text) and re.search(r"\]\s*\)$", text):
        text = _OUTER_CLOSE_RE.sub("", _OUTER_OPEN_RE.sub("", text))
    return text


def normalize_tuple_notation(text: str) -> str:
    """Rewrite ``(x, y, z)`` and ``([x,y,z], req)`` tuples into list notation."""
    text = text.strip()
    text = _TUPLE_COORD_RE.sub(r"[\1,\2,\3]", text)
    text = _TUPLE_PAIR_RE.sub(r"[\1,\2]", text)
    return text


def _literal(text: str, error: type[ValueError], label: str) -> object:
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
        raise error(f"{label}: could not evaluate array literal ({exc})") from exc


def parse_recorded_actions_text(text: str) -> ActionMatrix:
    """Parse a ``step_count x 8`` recorded-actions literal.

    Raises :exc:`ActionsParseError` when anything other than a numeric array
    remains after stripping decorations, or when the matrix is malformed.
    """
    if not isinstance(text, str):
        raise ActionsParseError("recorded_actions: expected text")
    stripped = strip_array_decorations(text)
    if not _NUMERIC_ARRAY_RE.match(stripped):
        raise ActionsParseError(
            "recorded_actions: unexpected characters (not a numeric array)"
        )
    raw = _literal(stripped, ActionsParseError, "recorded_actions")
    return normalize_actions(raw)


def parse_valid_placements_text(text: str) -> Catalog:
    """Parse the per-discipline valid-placement literal.

    The top level must hold exactly 8 discipline lists. Entries are bare
    ``[x, y, z]`` coordinates or ``[[x, y, z], requirement]`` pairs; tuple
    notation is accepted and normalized first.
    """
    if not isinstance(text, str):
        raise CatalogParseError("valid: expected text")
    normalized = normalize_tuple_notation(text)
    if not _NUMERIC_ARRAY_RE.match(normalized):
        logger.warning("valid: non-numeric artifacts detected; attempting to evaluate anyway")
    raw = _literal(normalized, CatalogParseError, "valid")
    return normalize_catalog(raw)
