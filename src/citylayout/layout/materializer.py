"""Turn placed blocks into buildings and street furniture.

Pure functions: each call returns new tuples and leaves its inputs alone.
"""

import math
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.config import DecorationConfig, PackingConfig
from ..core.contracts import Building, Decoration, DecorationType, DeveloperRecord
from ..core.prng import hash_str, seeded_random
from ..scoring.engine import ScoringEngine
from .packer import PlacedBlock

logger = logging.getLogger(__name__)

FLOOR_HEIGHT = 6
WINDOW_SPACING = 5
MIN_FLOORS = 3
MIN_WINDOWS = 3

CAR_SEED_SALT = 777
CAR_VARIANTS = 4
TREE_VARIANTS = 3


@dataclass(frozen=True)
class BlockOutput:
    buildings: Tuple[Building, ...]
    decorations: Tuple[Decoration, ...]


def _edge_point(center: Tuple[float, float], edge: int, offset: float, along: float) -> Tuple[float, float]:
    """Point on one of the four block edges: 0 = -z, 1 = +x, 2 = +z, 3 = -x."""
    cx, cz = center
    if edge == 0:
        return cx + along, cz - offset
    if edge == 1:
        return cx + offset, cz + along
    if edge == 2:
        return cx + along, cz + offset
    return cx - offset, cz + along


class BlockMaterializer:
    """
    Builds the buildings, sidewalk, lamps, cars and trees of one block.

    Ranks fall back to the 1-based input position when a record carries none.
    """

    def __init__(self, scorer: ScoringEngine,
                 packing: Optional[PackingConfig] = None,
                 decorations: Optional[DecorationConfig] = None,
                 input_ranks: Optional[dict] = None):
        self.scorer = scorer
        self.packing = packing or PackingConfig()
        self.decorations = decorations or DecorationConfig()
        self.input_ranks = input_ranks or {}

    def lot_offset(self, index: int) -> Tuple[float, float]:
        """Offset of lot ``index`` from the block centre on the 4x4 sub-grid."""
        columns = self.packing.block_columns
        row, col = divmod(index, columns)
        half = (columns - 1) / 2
        pitch = self.packing.lot_pitch
        return (col - half) * pitch, (row - half) * pitch

    def build(self, record: DeveloperRecord, placed: PlacedBlock, index: int) -> Building:
        dims, lit_fraction = self.scorer.dimensions(record)
        dx, dz = self.lot_offset(index)
        cx, cz = placed.center

        contributions = record.contributions_total if record.has_expanded_metrics else record.contributions
        return Building(
            login=record.login,
            rank=record.rank if record.rank is not None else self.input_ranks.get(record.login, 0),
            district=placed.district_id,
            block_cell=placed.cell,
            position=(cx + dx, 0.0, cz + dz),
            width=dims.width,
            depth=dims.depth,
            height=dims.height,
            floors=max(MIN_FLOORS, int(dims.height // FLOOR_HEIGHT)),
            windows_per_floor=max(MIN_WINDOWS, dims.width // WINDOW_SPACING),
            side_windows_per_floor=max(MIN_WINDOWS, dims.depth // WINDOW_SPACING),
            lit_fraction=lit_fraction,
            contributions=contributions,
            total_stars=record.total_stars,
            public_repos=record.public_repos,
            name=record.name,
            avatar_url=record.avatar_url,
            primary_language=record.primary_language,
            gameplay=record.gameplay,
        )

    def sidewalk(self, placed: PlacedBlock) -> Decoration:
        side = self.packing.block_footprint + self.decorations.sidewalk_margin
        cx, cz = placed.center
        return Decoration(
            type=DecorationType.SIDEWALK,
            position=(cx, 0.1, cz),
            size=(side, side),
        )

    def street_lamps(self, placed: PlacedBlock) -> Tuple[Decoration, ...]:
        """Two to four lamps on seeded block edges."""
        seed = placed.block.seed
        footprint = self.packing.block_footprint
        offset = footprint / 2 + self.decorations.lamp_edge_offset

        count = 2 + int(math.floor(seeded_random(seed * 311) * 3))
        lamps = []
        for li in range(count):
            lamp_seed = seed * 5000 + li
            edge = int(math.floor(seeded_random(lamp_seed) * 4))
            along = (seeded_random(lamp_seed + 50) - 0.5) * footprint
            x, z = _edge_point(placed.center, edge, offset, along)
            lamps.append(Decoration(type=DecorationType.STREET_LAMP, position=(x, 0.0, z)))
        return tuple(lamps)

    def parked_cars(self, buildings: Tuple[Building, ...]) -> Tuple[Decoration, ...]:
        """At most one car per building, beside it on a seeded side."""
        cars = []
        for building in buildings:
            car_seed = hash_str(building.login) + CAR_SEED_SALT
            if seeded_random(car_seed) >= self.decorations.car_probability:
                continue
            side = 1 if seeded_random(car_seed + 1) > 0.5 else -1
            x, _, z = building.position
            cars.append(Decoration(
                type=DecorationType.CAR,
                position=(x + side * (building.width / 2 + self.decorations.car_offset), 0.0, z),
                rotation=0.0 if seeded_random(car_seed + 2) > 0.5 else math.pi,
                variant=int(math.floor(seeded_random(car_seed + 3) * CAR_VARIANTS)),
            ))
        return tuple(cars)

    def street_trees(self, placed: PlacedBlock) -> Tuple[Decoration, ...]:
        """One or two trees along seeded block edges."""
        seed = placed.block.seed
        footprint = self.packing.block_footprint
        offset = footprint / 2 + self.decorations.tree_edge_offset

        count = 1 + int(math.floor(seeded_random(seed * 421) * 2))
        trees = []
        for ti in range(count):
            tree_seed = seed * 6000 + ti
            edge = int(math.floor(seeded_random(tree_seed) * 4))
            along = (seeded_random(tree_seed + 50) - 0.5) * footprint * 0.8
            x, z = _edge_point(placed.center, edge, offset, along)
            trees.append(Decoration(
                type=DecorationType.TREE,
                position=(x, 0.0, z),
                rotation=seeded_random(tree_seed + 100) * math.pi * 2,
                variant=int(math.floor(seeded_random(tree_seed + 200) * TREE_VARIANTS)),
            ))
        return tuple(trees)

    def materialize(self, placed: PlacedBlock) -> BlockOutput:
        """Buildings and decorations for one placed block."""
        buildings = tuple(
            self.build(record, placed, i) for i, record in enumerate(placed.block.records)
        )
        decorations = (
            (self.sidewalk(placed),)
            + self.street_lamps(placed)
            + self.parked_cars(buildings)
            + self.street_trees(placed)
        )
        return BlockOutput(buildings=buildings, decorations=decorations)
