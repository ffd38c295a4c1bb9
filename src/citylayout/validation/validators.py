"""Validation logic for generated city layouts.

Pure check functions that verify the geometric and bookkeeping invariants
of a layout without modifying it. Each returns ``(is_valid, reason)``.
"""

import logging
from collections import Counter
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.config import LayoutConfig
from ..core.contracts import CityLayout, DecorationType, DeveloperRecord
from ..districts import DOWNTOWN_ID
from ..scoring.engine import ScoreContext, ScoringEngine
from ..layout.partitioner import rank_records
from .frames import buildings_to_geodataframe
from .spatial_index import FootprintIndex

logger = logging.getLogger(__name__)


class LayoutValidationError(RuntimeError):
    """Raised when strict output validation finds a broken invariant."""

    def __init__(self, reasons: List[str]):
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons))


def validate_cardinality(layout: CityLayout, records: Sequence[DeveloperRecord]) -> Tuple[bool, str]:
    """One building per record, with the multiset of logins preserved."""
    if len(layout.buildings) != len(records):
        return False, f"Building count {len(layout.buildings)} != record count {len(records)}"

    expected = Counter(r.login for r in records)
    actual = Counter(b.login for b in layout.buildings)
    if expected != actual:
        missing = sorted((expected - actual).keys())[:5]
        extra = sorted((actual - expected).keys())[:5]
        return False, f"Login mismatch: missing={missing} extra={extra}"

    return True, "Valid"


def validate_dimension_bounds(layout: CityLayout, config: Optional[LayoutConfig] = None) -> Tuple[bool, str]:
    """Height within the configured range, positive width/depth, lit fraction in [0, 1]."""
    if not layout.buildings:
        return True, "Valid"
    config = config or LayoutConfig()

    frame = buildings_to_geodataframe(layout)
    heights = frame['height'].to_numpy(dtype=float)
    if np.any(heights < config.scoring.min_height) or np.any(heights > config.scoring.max_height):
        return False, f"Height outside [{config.scoring.min_height}, {config.scoring.max_height}]: " \
                      f"min={heights.min():.1f} max={heights.max():.1f}"

    if np.any(frame['width'].to_numpy() <= 0) or np.any(frame['depth'].to_numpy() <= 0):
        return False, "Non-positive width or depth"

    lit = frame['lit_fraction'].to_numpy(dtype=float)
    if np.any(lit < 0) or np.any(lit > 1):
        return False, f"Lit fraction outside [0, 1]: min={lit.min():.3f} max={lit.max():.3f}"

    return True, "Valid"


def validate_block_capacity(layout: CityLayout, capacity: int = 16) -> Tuple[bool, str]:
    """No grid cell holds more buildings than a block allows."""
    per_cell = Counter(b.block_cell for b in layout.buildings)
    for cell, count in per_cell.items():
        if count > capacity:
            return False, f"Block {cell} holds {count} buildings > {capacity}"
    return True, "Valid"


def validate_unique_cells(layout: CityLayout) -> Tuple[bool, str]:
    """Each grid cell hosts one district and no plaza."""
    cell_districts = {}
    for b in layout.buildings:
        previous = cell_districts.setdefault(b.block_cell, b.district)
        if previous != b.district:
            return False, f"Block {b.block_cell} mixes districts {previous} and {b.district}"

    spatial_index = FootprintIndex()
    spatial_index.build(layout.buildings)
    for plaza in layout.plazas:
        px, _, pz = plaza.position
        half = plaza.size / 2
        covered = spatial_index.find_buildings_in_box(px - half, pz - half, px + half, pz + half)
        if covered:
            return False, f"Plaza at ({px:.1f}, {pz:.1f}) covers building {covered[0].login}"
    return True, "Valid"


def validate_no_overlap(layout: CityLayout) -> Tuple[bool, str]:
    """No two building footprints share positive area."""
    spatial_index = FootprintIndex()
    spatial_index.build(layout.buildings)

    overlaps = spatial_index.find_overlapping_pairs()
    if overlaps:
        a, b = overlaps[0]
        return False, f"{len(overlaps)} overlapping footprints, e.g. {a.login} and {b.login}"
    return True, "Valid"


def validate_zone_containment(layout: CityLayout) -> Tuple[bool, str]:
    """Every building lies inside the bounds of exactly one zone with its district id."""
    zones_by_id = {}
    for zone in layout.district_zones:
        if zone.id in zones_by_id:
            return False, f"Duplicate district zone {zone.id}"
        zones_by_id[zone.id] = zone

    for b in layout.buildings:
        zone = zones_by_id.get(b.district)
        if zone is None:
            return False, f"Building {b.login} has no zone for district {b.district}"
        x, _, z = b.position
        if not zone.bounds.contains(x, z):
            return False, f"Building {b.login} at ({x:.1f}, {z:.1f}) outside zone {zone.id}"

    populations = Counter(b.district for b in layout.buildings)
    for zone_id, zone in zones_by_id.items():
        if populations.get(zone_id, 0) != zone.population:
            return False, f"Zone {zone_id} population {zone.population} != {populations.get(zone_id, 0)}"

    return True, "Valid"


def validate_downtown_precedence(layout: CityLayout, records: Sequence[DeveloperRecord],
                                 config: Optional[LayoutConfig] = None) -> Tuple[bool, str]:
    """The downtown logins are exactly the top-K logins by composite score."""
    config = config or LayoutConfig()
    scorer = ScoringEngine(ScoreContext.from_records(records), config.scoring)
    expected = {r.login for r in rank_records(records, scorer)[:config.packing.downtown_size]}
    actual = {b.login for b in layout.buildings if b.district == DOWNTOWN_ID}

    if expected != actual:
        return False, f"Downtown membership differs: {len(expected ^ actual)} logins out of place"
    return True, "Valid"


def validate_plaza_decorations(layout: CityLayout) -> Tuple[bool, str]:
    """Exactly one fountain when plazas exist, none otherwise."""
    fountains = len(layout.decorations_of(DecorationType.FOUNTAIN))
    expected = 1 if layout.plazas else 0
    if fountains != expected:
        return False, f"Expected {expected} fountain(s), found {fountains}"
    return True, "Valid"


class LayoutValidator:
    """
    Runs the layout checks appropriate for a strictness level.

    low:    cardinality and dimension bounds
    medium: + block capacity, cell exclusivity, overlap and zone containment
    high:   + downtown precedence and plaza decorations
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def validate(self, layout: CityLayout, records: Sequence[DeveloperRecord]) -> Tuple[bool, List[str]]:
        """
        Validate a layout against the records it was generated from.

        Returns:
            Tuple of (is_valid, list of failure reasons)
        """
        strictness = self.config.validation.validation_strictness.lower()
        checks = [
            ('cardinality', lambda: validate_cardinality(layout, records)),
            ('dimension_bounds', lambda: validate_dimension_bounds(layout, self.config)),
        ]
        if strictness in ('medium', 'high'):
            checks += [
                ('block_capacity', lambda: validate_block_capacity(layout, self.config.packing.block_capacity)),
                ('unique_cells', lambda: validate_unique_cells(layout)),
                ('no_overlap', lambda: validate_no_overlap(layout)),
                ('zone_containment', lambda: validate_zone_containment(layout)),
            ]
        if strictness == 'high':
            checks += [
                ('downtown_precedence', lambda: validate_downtown_precedence(layout, records, self.config)),
                ('plaza_decorations', lambda: validate_plaza_decorations(layout)),
            ]

        failures = []
        for name, check in checks:
            valid, reason = check()
            if not valid:
                logger.warning(f"Layout check '{name}' failed: {reason}")
                failures.append(f"{name}: {reason}")
            else:
                logger.debug(f"Layout check '{name}' passed")

        return not failures, failures

    def validate_or_raise(self, layout: CityLayout, records: Sequence[DeveloperRecord]):
        valid, failures = self.validate(layout, records)
        if not valid:
            raise LayoutValidationError(failures)
