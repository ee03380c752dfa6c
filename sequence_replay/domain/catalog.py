"""Valid-placement catalogs: one ordered placement list per discipline.

A raw catalog entry arrives in one of two admissible shapes, a bare
``[x, y, z]`` coordinate or a ``[[x, y, z], requirement]`` pair. Both are
normalized at load time into a single :class:`Placement` record. A missing
requirement means "no completion tracking", which is not the same as zero.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import TypeAlias

from sequence_replay.config.constants import COORDINATE_DIMS, DISCIPLINES, N_DISCIPLINES
from sequence_replay.errors import CatalogParseError

Coordinate: TypeAlias = tuple[int, int, int]
Requirement: TypeAlias = int | float

# Coordinates are exported as int64 columns.
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def discipline_rank(discipline: str) -> int:
    """Return the position of *discipline* in the fixed display order."""
    try:
        return DISCIPLINES.index(discipline)
    except ValueError:
        raise ValueError(f"Unknown discipline {discipline!r}") from None


# ---------------------------------------------------------------------------
# Raw entry shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BareCoordinate:
    """Catalog entry given as a plain coordinate."""

    coord: Coordinate


@dataclass(frozen=True)
class CoordinateWithRequirement:
    """Catalog entry given as a coordinate plus required-unit count."""

    coord: Coordinate
    requirement: Requirement | None


RawEntry: TypeAlias = BareCoordinate | CoordinateWithRequirement


@dataclass(frozen=True)
class Placement:
    """Canonical catalog entry."""

    coord: Coordinate
    requirement: Requirement | None = None

    @classmethod
    def from_raw(cls, entry: RawEntry) -> Placement:
        if isinstance(entry, CoordinateWithRequirement):
            return cls(coord=entry.coord, requirement=entry.requirement)
        return cls(coord=entry.coord)


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _to_coordinate(value: object, where: str) -> Coordinate:
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) != COORDINATE_DIMS:
        raise CatalogParseError(f"valid: expected a 3-integer coordinate at {where}")
    coord: list[int] = []
    for component in value:
        if not _is_number(component):
            raise CatalogParseError(f"valid: non-numeric coordinate component at {where}")
        if isinstance(component, Integral):
            number = int(component)
        elif not math.isfinite(component):
            raise CatalogParseError(f"valid: non-numeric coordinate component at {where}")
        elif not float(component).is_integer():
            raise CatalogParseError(f"valid: non-integral coordinate component at {where}")
        else:
            number = int(component)
        if not _INT64_MIN <= number <= _INT64_MAX:
            raise CatalogParseError(f"valid: coordinate component out of int64 range at {where}")
        coord.append(number)
    return (coord[0], coord[1], coord[2])


def _to_requirement(value: object, where: str) -> Requirement | None:
    if value is None:
        return None
    if not _is_number(value):
        raise CatalogParseError(f"valid: non-numeric requirement at {where}")
    if isinstance(value, Integral):
        if value < 0:
            raise CatalogParseError(f"valid: negative requirement at {where}")
        # Beyond float range counts as infinite, i.e. untracked.
        return int(value) if value <= sys.float_info.max else None
    if not math.isfinite(value):
        return None
    if value < 0:
        raise CatalogParseError(f"valid: negative requirement at {where}")
    return int(value) if float(value).is_integer() else float(value)


def classify_entry(item: object, where: str) -> RawEntry:
    """Identify which admissible shape *item* has.

    Also accepts the ``{"coord": [...], "req": n}`` object form, where
    ``req`` is optional.
    """
    if isinstance(item, Mapping):
        if "coord" not in item:
            raise CatalogParseError(f"valid: unexpected entry at {where}")
        coord = _to_coordinate(item["coord"], where)
        if "req" in item:
            return CoordinateWithRequirement(coord, _to_requirement(item["req"], where))
        return BareCoordinate(coord)
    if isinstance(item, Sequence) and not isinstance(item, str):
        if (
            len(item) == 2
            and isinstance(item[0], Sequence)
            and not isinstance(item[0], str)
            and len(item[0]) == COORDINATE_DIMS
        ):
            return CoordinateWithRequirement(
                _to_coordinate(item[0], where), _to_requirement(item[1], where)
            )
        if len(item) == COORDINATE_DIMS:
            return BareCoordinate(_to_coordinate(item, where))
    raise CatalogParseError(f"valid: unexpected entry at {where}")


# ---------------------------------------------------------------------------
# Catalog containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DisciplineCatalog:
    """Ordered placements for one discipline; list position is the action index."""

    discipline: str
    placements: tuple[Placement, ...]
    _requirements: dict[Coordinate, Requirement | None] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        requirements: dict[Coordinate, Requirement | None] = {}
        for placement in self.placements:
            requirements[placement.coord] = placement.requirement
        object.__setattr__(self, "_requirements", requirements)

    def __len__(self) -> int:
        return len(self.placements)

    @property
    def noop_index(self) -> int:
        """Action index meaning "no placement this step"."""
        return len(self.placements)

    def requirement_for(self, coord: Coordinate) -> Requirement | None:
        """Required units at *coord*, or None when not tracked."""
        return self._requirements.get(coord)


@dataclass(frozen=True)
class Catalog:
    """Per-discipline catalogs in fixed discipline order."""

    disciplines: tuple[DisciplineCatalog, ...]

    def __post_init__(self) -> None:
        names = tuple(d.discipline for d in self.disciplines)
        if names != DISCIPLINES:
            raise CatalogParseError(
                f"valid: expected disciplines {list(DISCIPLINES)}, got {list(names)}"
            )

    def __getitem__(self, position: int) -> DisciplineCatalog:
        return self.disciplines[position]

    def __iter__(self) -> Iterator[DisciplineCatalog]:
        return iter(self.disciplines)

    def __len__(self) -> int:
        return len(self.disciplines)

    def by_name(self, discipline: str) -> DisciplineCatalog:
        return self.disciplines[discipline_rank(discipline)]

    def noop_indices(self) -> dict[str, int]:
        return {d.discipline: d.noop_index for d in self.disciplines}


def _normalize_list(raw_list: object, position: int) -> DisciplineCatalog:
    discipline = DISCIPLINES[position]
    if not isinstance(raw_list, Sequence) or isinstance(raw_list, str):
        raise CatalogParseError(f"valid: discipline index {position} is not a list")
    placements = tuple(
        Placement.from_raw(classify_entry(item, f"[{position}][{j}]"))
        for j, item in enumerate(raw_list)
    )
    return DisciplineCatalog(discipline=discipline, placements=placements)


def normalize_catalog(raw: object) -> Catalog:
    """Normalize structured catalog input into a :class:`Catalog`.

    *raw* is either a sequence of exactly 8 per-discipline lists, or a
    mapping keyed by exactly the 8 discipline names.
    """
    if isinstance(raw, Catalog):
        return raw
    if isinstance(raw, Mapping):
        keys = set(raw)
        if keys != set(DISCIPLINES):
            missing = sorted(set(DISCIPLINES) - keys)
            extra = sorted(str(k) for k in keys - set(DISCIPLINES))
            raise CatalogParseError(
                f"valid: mapping must name all {N_DISCIPLINES} disciplines "
                f"(missing={missing}, unexpected={extra})"
            )
        lists = [raw[name] for name in DISCIPLINES]
    elif isinstance(raw, Sequence) and not isinstance(raw, str):
        lists = list(raw)
    else:
        raise CatalogParseError("valid: top-level must be an array of 8 discipline lists")

    if len(lists) != N_DISCIPLINES:
        raise CatalogParseError(
            f"valid: top-level must be an array of {N_DISCIPLINES} discipline lists "
            f"(got {len(lists)})"
        )
    return Catalog(disciplines=tuple(_normalize_list(lst, i) for i, lst in enumerate(lists)))
