"""
City Layout

Deterministic procedural city layouts from developer activity metrics.
"""

from .core import (
    LayoutConfig, get_default_config, DeveloperRecord, Building, BuildingDims, CityLayout,
    Decoration, DecorationType, DistrictZone, Plaza, River, Bridge,
)
from .districts import District, infer_district
from .scoring import calc_building_dims
from .layout import CityLayoutGenerator, generate_city_layout
from .validation import LayoutValidationError, LayoutValidator

__version__ = "0.1.0"

__all__ = [
    'LayoutConfig',
    'get_default_config',
    'DeveloperRecord',
    'Building',
    'BuildingDims',
    'CityLayout',
    'Decoration',
    'DecorationType',
    'DistrictZone',
    'Plaza',
    'River',
    'Bridge',
    'District',
    'infer_district',
    'calc_building_dims',
    'CityLayoutGenerator',
    'generate_city_layout',
    'LayoutValidationError',
    'LayoutValidator',
]
