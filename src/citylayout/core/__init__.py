"""
Core Module

Data contracts, configuration and deterministic randomness shared by
every stage of the layout pipeline.
"""

from .config import LayoutConfig, get_default_config
from .contracts import (
    DeveloperRecord, Building, BuildingDims, Plaza, Decoration, DecorationType,
    River, Bridge, DistrictZone, ZoneBounds, CityLayout,
)
from .prng import hash_str, seeded_random

__all__ = [
    'LayoutConfig',
    'get_default_config',
    'DeveloperRecord',
    'Building',
    'BuildingDims',
    'Plaza',
    'Decoration',
    'DecorationType',
    'River',
    'Bridge',
    'DistrictZone',
    'ZoneBounds',
    'CityLayout',
    'hash_str',
    'seeded_random',
]
