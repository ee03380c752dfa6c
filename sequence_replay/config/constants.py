"""Centralized domain constants for episode replay.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

DISCIPLINES: tuple[str, ...] = (
    "piling",
    "structural_steel",
    "piping",
    "equipment",
    "instrumentation",
    "cable_tray",
    "electrical",
    "insulation",
)
"""Construction disciplines in layering/display order."""

N_DISCIPLINES = 8
"""Number of entries in every recorded action row."""

COORDINATE_DIMS = 3
"""Cells are addressed by integer (x, y, z) coordinates."""

DEFAULT_STEPS_PER_SECOND = 6
"""Default auto-advance cadence while playing."""

MIN_STEPS_PER_SECOND = 1
"""Lower clamp for the playback cadence."""

MAX_STEPS_PER_SECOND = 60
"""Upper clamp for the playback cadence."""

COMPLETION_SHADE_DEPTH = 0.55
"""Brightness removed from a fully completed cell (darker = more complete)."""

PREVIEW_WIDTH_PX = 1600
"""Default width of a rendered target preview."""

PREVIEW_HEIGHT_PX = 1000
"""Default height of a rendered target preview."""
