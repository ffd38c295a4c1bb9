"""
Layout Module

Partitioning, grid packing, block materialization, roads, plazas, the
river and district zones, tied together by the layout generator.
"""

from .partitioner import Block, Cluster, Partition, partition_records, rank_records, seeded_shuffle
from .packer import GridSpiralPacker, OccupiedGrid, cluster_origin, iter_spiral, spiral_coord
from .materializer import BlockMaterializer
from .roads import build_road_graph, generate_road_markings
from .plazas import build_plazas, decorate_plazas
from .river import place_bridges, place_river
from .zones import aggregate_district_zones
from .generator import CityLayoutGenerator, generate_city_layout

__all__ = [
    'Block',
    'Cluster',
    'Partition',
    'partition_records',
    'rank_records',
    'seeded_shuffle',
    'GridSpiralPacker',
    'OccupiedGrid',
    'cluster_origin',
    'iter_spiral',
    'spiral_coord',
    'BlockMaterializer',
    'build_road_graph',
    'generate_road_markings',
    'build_plazas',
    'decorate_plazas',
    'place_bridges',
    'place_river',
    'aggregate_district_zones',
    'CityLayoutGenerator',
    'generate_city_layout',
]
