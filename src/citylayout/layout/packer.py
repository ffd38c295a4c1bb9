#!/usr/bin/env python3
"""
Grid Spiral Packer

Assigns every block a unique integer grid cell. Each cluster walks an
expanding square spiral from its own origin and takes the next cell that
is not yet in the shared occupied set, so later clusters flow around
earlier ones. Placement order therefore matters: clusters are packed
sequentially against one ``OccupiedGrid``.
"""

import math
import logging
from dataclasses import dataclass
from itertools import islice
from typing import Iterator, List, Optional, Set, Tuple

from ..core.config import PackingConfig
from ..core.contracts import GridCell
from ..core.prng import seeded_random
from .partitioner import Block, Cluster, Partition

logger = logging.getLogger(__name__)

JITTER_SEED_STRIDE = 131


class OccupiedGrid:
    """
    Write-once set of claimed grid cells for one layout run.

    Passed explicitly to the packer; a cell can be claimed exactly once.
    """

    def __init__(self):
        self._cells: Set[GridCell] = set()
        self._order: List[GridCell] = []

    def claim(self, cell: GridCell) -> GridCell:
        if cell in self._cells:
            raise ValueError(f"Grid cell {cell} is already occupied")
        self._cells.add(cell)
        self._order.append(cell)
        return cell

    def is_occupied(self, cell: GridCell) -> bool:
        return cell in self._cells

    def __contains__(self, cell) -> bool:
        return cell in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def cells(self) -> Tuple[GridCell, ...]:
        """Claimed cells in claim order."""
        return tuple(self._order)


def iter_spiral() -> Iterator[GridCell]:
    """
    Yield lattice offsets along an expanding square spiral.

    Starts at (0, 0), steps to (1, 0), then turns left after every
    segment; the segment length grows by one every second turn.
    """
    x, y = 0, 0
    dx, dy = 1, 0
    seg_len, seg_passed, turns = 1, 0, 0
    yield (x, y)
    while True:
        x += dx
        y += dy
        yield (x, y)
        seg_passed += 1
        if seg_passed == seg_len:
            seg_passed = 0
            dx, dy = -dy, dx
            turns += 1
            if turns % 2 == 0:
                seg_len += 1


def spiral_coord(index: int) -> GridCell:
    """Offset of the ``index``-th spiral position."""
    if index < 0:
        raise ValueError(f"spiral index must be non-negative, got {index}")
    return next(islice(iter_spiral(), index, None))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def cluster_origin(index: int, count: int, radius: int) -> GridCell:
    """Origin cell of district cluster ``index`` of ``count`` on a ring around the centre."""
    angle = index / count * 2 * math.pi - math.pi / 2
    return (_round_half_up(radius * math.cos(angle)), _round_half_up(radius * math.sin(angle)))


@dataclass(frozen=True)
class PlacedBlock:
    """A block bound to its grid cell and world-space centre."""
    block: Block
    district_id: str
    cell: GridCell
    center: Tuple[float, float]
    deflected: bool


@dataclass(frozen=True)
class ClusterPlacement:
    cluster: Cluster
    origin: GridCell
    plaza_cell: GridCell
    plaza_center: Tuple[float, float]
    blocks: Tuple[PlacedBlock, ...]


class GridSpiralPacker:
    """Places clusters of blocks on the integer grid."""

    def __init__(self, config: Optional[PackingConfig] = None):
        self.config = config or PackingConfig()

    def cell_to_world(self, cell: GridCell) -> Tuple[float, float, bool]:
        """
        World (x, z) of a cell centre, before jitter.

        Rows beyond the river threshold are pushed further out to open the
        river channel; grid topology is unchanged.
        """
        gx, gz = cell
        step = self.config.grid_step
        x = gx * step
        z = gz * step
        deflected = z > self.config.river_threshold_z
        if deflected:
            z += self.config.river_push
        return x, z, deflected

    def block_center(self, cell: GridCell, seed: int) -> Tuple[float, float, bool]:
        """Cell centre plus a small cosmetic jitter derived from the block seed."""
        x, z, deflected = self.cell_to_world(cell)
        span = 2 * self.config.block_jitter
        base = seed * JITTER_SEED_STRIDE
        x += (seeded_random(base + 1) - 0.5) * span
        z += (seeded_random(base + 2) - 0.5) * span
        return x, z, deflected

    @staticmethod
    def _next_free(spiral: Iterator[GridCell], origin: GridCell, grid: OccupiedGrid) -> GridCell:
        ox, oz = origin
        for dx, dz in spiral:
            cell = (ox + dx, oz + dz)
            if cell not in grid:
                return grid.claim(cell)
        raise RuntimeError("spiral exhausted")  # unreachable: the spiral is infinite

    def place_cluster(self, cluster: Cluster, origin: GridCell, grid: OccupiedGrid) -> ClusterPlacement:
        """
        Claim a plaza cell and one cell per block for ``cluster``.

        Args:
            cluster: Cluster to place
            origin: Spiral origin for this cluster
            grid: Shared occupied set, mutated in place

        Returns:
            ClusterPlacement with world-space centres
        """
        spiral = iter_spiral()
        plaza_cell = self._next_free(spiral, origin, grid)
        px, pz, _ = self.cell_to_world(plaza_cell)

        placed = []
        for block in cluster.blocks:
            cell = self._next_free(spiral, origin, grid)
            cx, cz, deflected = self.block_center(cell, block.seed)
            placed.append(PlacedBlock(
                block=block,
                district_id=cluster.district_id,
                cell=cell,
                center=(cx, cz),
                deflected=deflected,
            ))

        if plaza_cell != origin:
            logger.debug(f"Cluster {cluster.district_id}: origin {origin} taken, plaza moved to {plaza_cell}")

        return ClusterPlacement(
            cluster=cluster,
            origin=origin,
            plaza_cell=plaza_cell,
            plaza_center=(px, pz),
            blocks=tuple(placed),
        )

    def pack(self, partition: Partition, grid: OccupiedGrid) -> Tuple[ClusterPlacement, ...]:
        """Place downtown at the centre, then every district on the surrounding ring."""
        placements = []
        if partition.downtown.blocks:
            placements.append(self.place_cluster(partition.downtown, (0, 0), grid))

        count = len(partition.districts)
        for i, cluster in enumerate(partition.districts):
            origin = cluster_origin(i, count, self.config.district_radius)
            placements.append(self.place_cluster(cluster, origin, grid))

        logger.debug(f"Packed {len(placements)} clusters into {len(grid)} grid cells")
        return tuple(placements)
