"""In-memory tabular views of a layout for analysis."""

import geopandas as gpd

from ..core.contracts import CityLayout
from .spatial_index import footprint_polygon


def buildings_to_geodataframe(layout: CityLayout) -> gpd.GeoDataFrame:
    """One row per building with its footprint box as geometry (x, z plane)."""
    rows = {
        'login': [],
        'district': [],
        'grid_x': [],
        'grid_z': [],
        'height': [],
        'width': [],
        'depth': [],
        'lit_fraction': [],
        'geometry': [],
    }
    for b in layout.buildings:
        rows['login'].append(b.login)
        rows['district'].append(b.district)
        rows['grid_x'].append(b.block_cell[0])
        rows['grid_z'].append(b.block_cell[1])
        rows['height'].append(b.height)
        rows['width'].append(b.width)
        rows['depth'].append(b.depth)
        rows['lit_fraction'].append(b.lit_fraction)
        rows['geometry'].append(footprint_polygon(b))
    return gpd.GeoDataFrame(rows, geometry='geometry')
