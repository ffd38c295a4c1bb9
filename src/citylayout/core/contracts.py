#!/usr/bin/env python3
"""
Layout Contracts Module - Immutable Data Contracts

Frozen input and output records for the city layout generator, with
invariant checks in ``__post_init__``.
"""

import math
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]
GridCell = Tuple[int, int]

MIN_HEIGHT = 35.0
MAX_HEIGHT = 600.0

_NON_NEGATIVE_COUNTERS = (
    'contributions', 'total_stars', 'public_repos',
    'contributions_total', 'contribution_years', 'total_prs', 'total_reviews',
    'repos_contributed_to', 'followers', 'following', 'organizations_count',
    'account_age_years', 'current_streak', 'longest_streak',
    'active_days_last_year', 'language_diversity', 'top_repo_stars',
)


def _freeze_mapping(value: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class DeveloperRecord:
    """
    One developer's metrics, keyed by ``login``.

    Expanded lifetime metrics are optional; a record without a positive
    ``contributions_total`` is scored with the legacy formulas. ``gameplay``
    is opaque state copied onto the output building without interpretation.
    """
    login: str
    contributions: int = 0
    total_stars: int = 0
    public_repos: int = 0
    primary_language: Optional[str] = None
    district: Optional[str] = None
    rank: Optional[int] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    # Expanded lifetime metrics
    contributions_total: Optional[int] = None
    contribution_years: Optional[int] = None
    total_prs: Optional[int] = None
    total_reviews: Optional[int] = None
    repos_contributed_to: Optional[int] = None
    followers: Optional[int] = None
    following: Optional[int] = None
    organizations_count: Optional[int] = None
    account_age_years: Optional[float] = None
    current_streak: Optional[int] = None
    longest_streak: Optional[int] = None
    active_days_last_year: Optional[int] = None
    language_diversity: Optional[int] = None
    top_repo_stars: Optional[int] = None

    gameplay: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate contract invariants."""
        if not self.login:
            raise ValueError("DeveloperRecord: Empty login not allowed")

        for name in _NON_NEGATIVE_COUNTERS:
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"DeveloperRecord {self.login}: {name} must be non-negative, got {value}")

        object.__setattr__(self, 'gameplay', _freeze_mapping(self.gameplay))

    @property
    def has_expanded_metrics(self) -> bool:
        """True when lifetime metrics were ingested for this developer."""
        return (self.contributions_total or 0) > 0


@dataclass(frozen=True)
class BuildingDims:
    """Width/height/depth triple for a single developer."""
    width: int
    height: float
    depth: int


@dataclass(frozen=True)
class Building:
    """Placed building for one developer."""
    login: str
    rank: int
    district: str
    block_cell: GridCell
    position: Vec3
    width: int
    depth: int
    height: float
    floors: int
    windows_per_floor: int
    side_windows_per_floor: int
    lit_fraction: float
    contributions: int = 0
    total_stars: int = 0
    public_repos: int = 0
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    primary_language: Optional[str] = None
    gameplay: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate contract invariants."""
        if not (MIN_HEIGHT <= self.height <= MAX_HEIGHT):
            raise ValueError(f"Building {self.login}: height {self.height} outside [{MIN_HEIGHT}, {MAX_HEIGHT}]")
        if self.width <= 0 or self.depth <= 0:
            raise ValueError(f"Building {self.login}: width/depth must be positive")
        if not (0.0 <= self.lit_fraction <= 1.0):
            raise ValueError(f"Building {self.login}: lit_fraction {self.lit_fraction} outside [0, 1]")

        object.__setattr__(self, 'gameplay', _freeze_mapping(self.gameplay))

    @property
    def footprint_bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_z, max_x, max_z) of the ground footprint."""
        x, _, z = self.position
        return (x - self.width / 2, z - self.depth / 2, x + self.width / 2, z + self.depth / 2)


@dataclass(frozen=True)
class Plaza:
    """Open square at a cluster origin."""
    position: Vec3
    size: float
    variant: float


class DecorationType(Enum):
    """Kinds of decorative props."""
    TREE = "tree"
    STREET_LAMP = "streetLamp"
    CAR = "car"
    BENCH = "bench"
    FOUNTAIN = "fountain"
    SIDEWALK = "sidewalk"
    ROAD_MARKING = "roadMarking"


@dataclass(frozen=True)
class Decoration:
    type: DecorationType
    position: Vec3
    rotation: float = 0.0
    variant: int = 0
    size: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class River:
    """Straight river running parallel to the X axis."""
    min_x: float
    max_x: float
    center_z: float
    width: float

    def __post_init__(self):
        if self.max_x < self.min_x:
            raise ValueError(f"River: max_x {self.max_x} < min_x {self.min_x}")
        if self.width <= 0:
            raise ValueError("River: width must be positive")

    @property
    def length(self) -> float:
        return self.max_x - self.min_x

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2


@dataclass(frozen=True)
class Bridge:
    position: Vec3
    width: float
    rotation: float = math.pi / 2


@dataclass(frozen=True)
class ZoneBounds:
    min_x: float
    max_x: float
    min_z: float
    max_z: float

    def contains(self, x: float, z: float) -> bool:
        """Inclusive containment test."""
        return self.min_x <= x <= self.max_x and self.min_z <= z <= self.max_z


@dataclass(frozen=True)
class DistrictZone:
    """Aggregated extent of one district."""
    id: str
    name: str
    color: str
    bounds: ZoneBounds
    center: Vec3
    population: int

    def __post_init__(self):
        if self.population <= 0:
            raise ValueError(f"DistrictZone {self.id}: population must be positive")


@dataclass(frozen=True)
class CityLayout:
    """Complete output of one layout run."""
    buildings: Tuple[Building, ...]
    plazas: Tuple[Plaza, ...]
    decorations: Tuple[Decoration, ...]
    river: River
    bridges: Tuple[Bridge, ...]
    district_zones: Tuple[DistrictZone, ...]

    def decorations_of(self, decoration_type: DecorationType) -> Tuple[Decoration, ...]:
        """Decorations of a single kind, in output order."""
        return tuple(d for d in self.decorations if d.type == decoration_type)

    def summary(self) -> Dict[str, Any]:
        return {
            'buildings': len(self.buildings),
            'plazas': len(self.plazas),
            'decorations': len(self.decorations),
            'bridges': len(self.bridges),
            'district_zones': len(self.district_zones),
            'river_length': self.river.length,
        }
