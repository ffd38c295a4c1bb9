"""Plazas at cluster origins and their trees, benches and fountain.

Plaza seeds are 1-based (``index + 1``), not the raw plaza index, so the
first plaza never draws from ``seeded_random(0)``, which is negative. Plaza
variants and decorations therefore differ from a 0-based seeding.
"""

import math
import logging
from typing import Iterable, Optional, Tuple

from ..core.config import DecorationConfig, PackingConfig
from ..core.contracts import Decoration, DecorationType, Plaza
from ..core.prng import seeded_random
from .packer import ClusterPlacement

logger = logging.getLogger(__name__)

TREE_VARIANTS = 3


def build_plazas(placements: Iterable[ClusterPlacement],
                 packing: Optional[PackingConfig] = None,
                 decorations: Optional[DecorationConfig] = None) -> Tuple[Plaza, ...]:
    """One plaza per cluster, in placement order."""
    packing = packing or PackingConfig()
    decorations = decorations or DecorationConfig()
    size = packing.block_footprint * decorations.plaza_size_ratio

    return tuple(
        Plaza(
            position=(placement.plaza_center[0], 0.0, placement.plaza_center[1]),
            size=size,
            variant=seeded_random((index + 1) * 997),
        )
        for index, placement in enumerate(placements)
    )


def decorate_plaza(plaza: Plaza, index: int) -> Tuple[Decoration, ...]:
    """
    Trees and benches scattered inside the plaza footprint.

    The first plaza also gets a fountain at its centre.
    """
    px, _, pz = plaza.position
    half = plaza.size / 2
    seed_base = index + 1
    items = []

    tree_count = 4 + int(math.floor(seeded_random(seed_base * 137 + 7777) * 5))
    for t in range(tree_count):
        seed = seed_base * 10000 + t
        items.append(Decoration(
            type=DecorationType.TREE,
            position=(px + (seeded_random(seed) - 0.5) * half * 1.6, 0.0,
                      pz + (seeded_random(seed + 50) - 0.5) * half * 1.6),
            rotation=seeded_random(seed + 100) * math.pi * 2,
            variant=int(math.floor(seeded_random(seed + 200) * TREE_VARIANTS)),
        ))

    bench_count = 2 + int(math.floor(seeded_random(seed_base * 251 + 8888) * 2))
    for b in range(bench_count):
        seed = seed_base * 20000 + b
        items.append(Decoration(
            type=DecorationType.BENCH,
            position=(px + (seeded_random(seed) - 0.5) * half, 0.0,
                      pz + (seeded_random(seed + 50) - 0.5) * half),
            rotation=seeded_random(seed + 100) * math.pi * 2,
        ))

    if index == 0:
        items.append(Decoration(type=DecorationType.FOUNTAIN, position=(px, 0.0, pz)))

    return tuple(items)


def decorate_plazas(plazas: Iterable[Plaza]) -> Tuple[Decoration, ...]:
    decorations = ()
    for index, plaza in enumerate(plazas):
        decorations += decorate_plaza(plaza, index)
    return decorations
