#!/usr/bin/env python3
"""
Spatial Index Module

R-tree based indexing of building footprints for fast overlap and
proximity queries.
"""

import logging
from typing import Dict, List, Sequence, Tuple

from rtree import index
from shapely.geometry import Point, Polygon, box

from ..core.contracts import Building

logger = logging.getLogger(__name__)


def footprint_polygon(building: Building) -> Polygon:
    """Ground footprint of a building as an axis-aligned box in (x, z)."""
    return box(*building.footprint_bounds)


class FootprintIndex:
    """
    R-tree over building footprints.

    Provides O(log n) lookups for:
    - Footprint overlap detection
    - Buildings near a point
    """

    def __init__(self):
        self.footprint_index = None
        self.buildings: Dict[int, Building] = {}
        self.footprints: Dict[int, Polygon] = {}

    def build(self, buildings: Sequence[Building]):
        """Build R-tree index for building footprints."""
        logger.debug("Building spatial index for footprints...")
        self.footprint_index = index.Index()
        self.buildings = {}
        self.footprints = {}

        for idx, building in enumerate(buildings):
            polygon = footprint_polygon(building)
            self.footprint_index.insert(idx, polygon.bounds)
            self.buildings[idx] = building
            self.footprints[idx] = polygon

        logger.debug(f"Built footprint index with {len(self.buildings)} entries")

    def find_overlapping_pairs(self) -> List[Tuple[Building, Building]]:
        """Pairs of buildings whose footprints share positive area."""
        if self.footprint_index is None:
            return []

        pairs = []
        for idx, polygon in self.footprints.items():
            for other in self.footprint_index.intersection(polygon.bounds):
                if other <= idx:
                    continue
                if polygon.intersection(self.footprints[other]).area > 0:
                    pairs.append((self.buildings[idx], self.buildings[other]))
        return pairs

    def find_buildings_near_point(self, x: float, z: float, radius: float) -> List[Building]:
        """Buildings whose footprint lies within ``radius`` of (x, z)."""
        if self.footprint_index is None:
            return []

        point = Point(x, z)
        bbox = (x - radius, z - radius, x + radius, z + radius)
        nearby = []
        for idx in self.footprint_index.intersection(bbox):
            if self.footprints[idx].distance(point) <= radius:
                nearby.append(self.buildings[idx])
        return nearby

    def find_buildings_in_box(self, min_x: float, min_z: float, max_x: float, max_z: float) -> List[Building]:
        """Buildings whose footprint shares positive area with the box."""
        if self.footprint_index is None:
            return []

        query = box(min_x, min_z, max_x, max_z)
        return [
            self.buildings[idx]
            for idx in self.footprint_index.intersection(query.bounds)
            if self.footprints[idx].intersection(query).area > 0
        ]
