"""Per-cell completion ratio and discipline mix helpers."""

from __future__ import annotations

from collections.abc import Mapping

from sequence_replay.config.constants import COMPLETION_SHADE_DEPTH
from sequence_replay.domain.catalog import Requirement, discipline_rank


def completion_ratio(
    counts: Mapping[str, int], requirements: Mapping[str, Requirement | None]
) -> float:
    """Fraction of tracked required units completed, in [0, 1].

    Only disciplines with a defined positive requirement contribute; each
    contributes ``min(done, need)`` so over-placement never exceeds 1.0.
    Returns 0.0 when no discipline at the cell is tracked.
    """
    done_sum = 0.0
    need_sum = 0.0
    for discipline, done in counts.items():
        need = requirements.get(discipline)
        if need is None or need <= 0:
            continue
        need_sum += need
        done_sum += min(done, need)
    if need_sum <= 0:
        return 0.0
    return done_sum / need_sum


def ordered_counts(counts: Mapping[str, int]) -> dict[str, int]:
    """Return *counts* re-keyed in discipline display order."""
    return {d: counts[d] for d in sorted(counts, key=discipline_rank)}


def counts_to_mix(counts: Mapping[str, int]) -> list[tuple[str, float]]:
    """Return ``(discipline, weight)`` bands in display order, weights summing to 1.

    Disciplines with a zero count are dropped; an empty list means no work.
    """
    positive = {d: n for d, n in counts.items() if n > 0}
    total = sum(positive.values())
    if total == 0:
        return []
    return [(d, n / total) for d, n in ordered_counts(positive).items()]


def brightness_for_completion(ratio: float) -> float:
    """Map completion to a brightness multiplier (darker = more complete)."""
    return 1.0 - COMPLETION_SHADE_DEPTH * max(0.0, min(1.0, ratio))
