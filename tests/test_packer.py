#!/usr/bin/env python3
"""
Unit tests for the grid spiral packer.
"""

import os
import sys
import unittest
from itertools import islice

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from citylayout.core.config import PackingConfig
from citylayout.layout.packer import (
    GridSpiralPacker, OccupiedGrid, cluster_origin, iter_spiral, spiral_coord,
)
from citylayout.layout.partitioner import Block, Cluster, Partition, partition_records
from citylayout.scoring.engine import ScoreContext, ScoringEngine

from factories import make_records


def _cluster(district_id, block_count, first_seed=1):
    blocks = tuple(Block(records=(), seed=first_seed + i) for i in range(block_count))
    return Cluster(district_id=district_id, blocks=blocks)


class TestSpiral(unittest.TestCase):
    """Test cases for the square spiral."""

    def test_first_positions(self):
        self.assertEqual(list(islice(iter_spiral(), 5)), [(0, 0), (1, 0), (1, 1), (0, 1), (-1, 1)])

    def test_rings_fill_squares(self):
        first_9 = set(islice(iter_spiral(), 9))
        self.assertEqual(first_9, {(x, y) for x in range(-1, 2) for y in range(-1, 2)})

        first_25 = set(islice(iter_spiral(), 25))
        self.assertEqual(first_25, {(x, y) for x in range(-2, 3) for y in range(-2, 3)})

    def test_no_repeats(self):
        cells = list(islice(iter_spiral(), 2000))
        self.assertEqual(len(cells), len(set(cells)))

    def test_spiral_coord(self):
        self.assertEqual(spiral_coord(0), (0, 0))
        self.assertEqual(spiral_coord(4), (-1, 1))
        with self.assertRaises(ValueError):
            spiral_coord(-1)


class TestOccupiedGrid(unittest.TestCase):
    """Test cases for OccupiedGrid."""

    def test_claim_once(self):
        grid = OccupiedGrid()
        grid.claim((2, 3))
        self.assertIn((2, 3), grid)
        self.assertTrue(grid.is_occupied((2, 3)))
        self.assertEqual(len(grid), 1)

    def test_double_claim_raises(self):
        grid = OccupiedGrid()
        grid.claim((0, 0))
        with self.assertRaises(ValueError):
            grid.claim((0, 0))

    def test_cells_in_claim_order(self):
        grid = OccupiedGrid()
        for cell in [(1, 1), (0, 0), (5, -2)]:
            grid.claim(cell)
        self.assertEqual(grid.cells, ((1, 1), (0, 0), (5, -2)))


class TestClusterOrigin(unittest.TestCase):
    """Test cases for cluster_origin."""

    def test_four_clusters_on_ring(self):
        origins = [cluster_origin(i, 4, 4) for i in range(4)]
        self.assertEqual(origins, [(0, -4), (4, 0), (0, 4), (-4, 0)])

    def test_first_origin_points_north(self):
        self.assertEqual(cluster_origin(0, 10, 4), (0, -4))


class TestGridSpiralPacker(unittest.TestCase):
    """Test cases for GridSpiralPacker."""

    def setUp(self):
        self.packer = GridSpiralPacker(PackingConfig())

    def test_cell_to_world(self):
        self.assertEqual(self.packer.cell_to_world((1, 0)), (202.0, 0.0, False))
        self.assertEqual(self.packer.cell_to_world((0, 2)), (0.0, 404.0, False))
        self.assertEqual(self.packer.cell_to_world((0, 3)), (0.0, 666.0, True))
        self.assertEqual(self.packer.cell_to_world((0, -5)), (0.0, -1010.0, False))

    def test_jitter_is_small_and_deterministic(self):
        for seed in range(1, 200):
            x, z, _ = self.packer.block_center((2, -1), seed)
            self.assertLessEqual(abs(x - 404.0), 3.0)
            self.assertLessEqual(abs(z + 202.0), 3.0)
        self.assertEqual(self.packer.block_center((1, 1), 7), self.packer.block_center((1, 1), 7))

    def test_plaza_takes_origin_then_blocks_follow_spiral(self):
        grid = OccupiedGrid()
        placement = self.packer.place_cluster(_cluster("downtown", 3), (0, 0), grid)

        self.assertEqual(placement.plaza_cell, (0, 0))
        self.assertEqual([p.cell for p in placement.blocks], [(1, 0), (1, 1), (0, 1)])
        self.assertEqual(placement.plaza_center, (0.0, 0.0))

    def test_taken_origin_moves_plaza(self):
        grid = OccupiedGrid()
        grid.claim((0, 0))
        placement = self.packer.place_cluster(_cluster("backend", 1), (0, 0), grid)

        self.assertEqual(placement.plaza_cell, (1, 0))
        self.assertEqual(placement.blocks[0].cell, (1, 1))

    def test_later_clusters_flow_around_earlier_ones(self):
        grid = OccupiedGrid()
        self.packer.place_cluster(_cluster("a", 30), (0, 0), grid)
        second = self.packer.place_cluster(_cluster("b", 30, first_seed=31), (1, 1), grid)

        self.assertEqual(len(grid), 62)
        self.assertEqual(len(set(grid.cells)), 62)
        self.assertTrue(all(p.district_id == "b" for p in second.blocks))

    def test_pack_full_partition(self):
        records = make_records(400, seed=4)
        scorer = ScoringEngine(ScoreContext.from_records(records))
        partition = partition_records(records, scorer, PackingConfig())

        grid = OccupiedGrid()
        placements = self.packer.pack(partition, grid)

        self.assertEqual(placements[0].cluster.district_id, "downtown")
        self.assertEqual(placements[0].plaza_cell, (0, 0))
        block_count = sum(len(p.blocks) for p in placements)
        self.assertEqual(len(grid), block_count + len(placements))

    def test_deflected_flag_follows_row(self):
        grid = OccupiedGrid()
        placement = self.packer.place_cluster(_cluster("gamedev", 1), (0, 4), grid)
        self.assertTrue(placement.blocks[0].deflected)

    def test_empty_partition(self):
        grid = OccupiedGrid()
        placements = self.packer.pack(Partition(downtown=_cluster("downtown", 0), districts=()), grid)
        self.assertEqual(placements, ())
        self.assertEqual(len(grid), 0)


if __name__ == '__main__':
    unittest.main()
