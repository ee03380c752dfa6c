"""Exception hierarchy for episode loading and slice filtering.

Every error subclasses :exc:`ValueError`, so callers that only guard against
bad input with ``except ValueError`` keep working.
"""

from __future__ import annotations


class ReplayError(ValueError):
    """Base class for all replay engine errors."""


class EpisodeParseError(ReplayError):
    """Recorded-actions or catalog input could not be loaded."""


class ActionsParseError(EpisodeParseError):
    """Recorded-actions input is malformed."""


class CatalogParseError(EpisodeParseError):
    """Valid-placement catalog input is malformed."""


class SliceFilterError(ReplayError):
    """Slice-filter expression was rejected and not installed."""
