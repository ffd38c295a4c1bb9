"""
Validation Module

Invariant checks for generated layouts, backed by an R-tree footprint index.
"""

from .spatial_index import FootprintIndex, footprint_polygon
from .frames import buildings_to_geodataframe
from .validators import (
    LayoutValidationError, LayoutValidator,
    validate_cardinality, validate_dimension_bounds, validate_block_capacity,
    validate_unique_cells, validate_no_overlap, validate_zone_containment,
    validate_downtown_precedence, validate_plaza_decorations,
)

__all__ = [
    'FootprintIndex',
    'footprint_polygon',
    'buildings_to_geodataframe',
    'LayoutValidationError',
    'LayoutValidator',
    'validate_cardinality',
    'validate_dimension_bounds',
    'validate_block_capacity',
    'validate_unique_cells',
    'validate_no_overlap',
    'validate_zone_containment',
    'validate_downtown_precedence',
    'validate_plaza_decorations',
]
