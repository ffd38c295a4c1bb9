"""Road network: dashed centre lines between neighbouring blocks.

Occupied block cells form a networkx graph with an edge for every pair of
orthogonally adjacent cells. Each edge is one street segment.
"""

import math
import logging
from typing import Iterable, List, Optional, Tuple

import networkx as nx

from ..core.config import DecorationConfig, PackingConfig
from ..core.contracts import Decoration, DecorationType
from .packer import PlacedBlock

logger = logging.getLogger(__name__)

AXIS_X = 'x'  # neighbours differ in gx, street runs along z
AXIS_Z = 'z'  # neighbours differ in gz, street runs along x

ROAD_MARKING_Y = 0.2


def build_road_graph(blocks: Iterable[PlacedBlock]) -> nx.Graph:
    """
    Adjacency graph of placed blocks.

    Nodes are grid cells carrying their PlacedBlock; edges join cells one
    step apart along x or z and record that axis.
    """
    graph = nx.Graph()
    for placed in blocks:
        graph.add_node(placed.cell, block=placed)

    for cell in list(graph.nodes):
        gx, gz = cell
        for neighbour, axis in (((gx + 1, gz), AXIS_X), ((gx, gz + 1), AXIS_Z)):
            if neighbour in graph:
                graph.add_edge(cell, neighbour, axis=axis)
    return graph


def crosses_river(a: PlacedBlock, b: PlacedBlock) -> bool:
    """True when the street between two blocks would run through the river channel."""
    return a.deflected != b.deflected


def _dash_positions(start: float, end: float, dash_length: float, dash_gap: float) -> List[float]:
    """Centres of dashes laid from ``start`` while they fit inside ``end``."""
    positions = []
    step = dash_length + dash_gap
    pos = start + dash_length / 2
    while pos + dash_length / 2 <= end + 1e-9:
        positions.append(pos)
        pos += step
    return positions


def street_markings(a: PlacedBlock, b: PlacedBlock, axis: str,
                    packing: PackingConfig, decorations: DecorationConfig) -> Tuple[Decoration, ...]:
    """
    Dashes along the street between two adjacent blocks.

    The line sits midway between the facing footprint edges and spans the
    overlap of the two footprints along the shared axis.
    """
    half = packing.block_footprint / 2
    (ax, az), (bx, bz) = a.center, b.center
    size = (decorations.dash_width, decorations.dash_length)

    if axis == AXIS_X:
        left, right = (a, b) if ax <= bx else (b, a)
        line_x = ((left.center[0] + half) + (right.center[0] - half)) / 2
        start = max(az, bz) - half
        end = min(az, bz) + half
        return tuple(
            Decoration(type=DecorationType.ROAD_MARKING, position=(line_x, ROAD_MARKING_Y, z),
                       rotation=0.0, size=size)
            for z in _dash_positions(start, end, decorations.dash_length, decorations.dash_gap)
        )

    near, far = (a, b) if az <= bz else (b, a)
    line_z = ((near.center[1] + half) + (far.center[1] - half)) / 2
    start = max(ax, bx) - half
    end = min(ax, bx) + half
    return tuple(
        Decoration(type=DecorationType.ROAD_MARKING, position=(x, ROAD_MARKING_Y, line_z),
                   rotation=math.pi / 2, size=size)
        for x in _dash_positions(start, end, decorations.dash_length, decorations.dash_gap)
    )


def generate_road_markings(blocks: Iterable[PlacedBlock],
                           packing: Optional[PackingConfig] = None,
                           decorations: Optional[DecorationConfig] = None) -> Tuple[Decoration, ...]:
    """Road markings for every adjacent block pair that does not straddle the river."""
    packing = packing or PackingConfig()
    decorations = decorations or DecorationConfig()

    graph = build_road_graph(blocks)
    markings = []
    skipped = 0
    for u, v, data in graph.edges(data=True):
        a = graph.nodes[u]['block']
        b = graph.nodes[v]['block']
        if crosses_river(a, b):
            skipped += 1
            continue
        markings.extend(street_markings(a, b, data['axis'], packing, decorations))

    if graph.number_of_nodes():
        logger.debug(f"Road graph: {graph.number_of_nodes()} blocks, {graph.number_of_edges()} streets, "
                     f"{nx.number_connected_components(graph)} components, {skipped} river crossings skipped")
    return tuple(markings)
