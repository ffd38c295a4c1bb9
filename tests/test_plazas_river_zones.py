#!/usr/bin/env python3
"""
Unit tests for plazas, the river and district zones.
"""

import math
import os
import sys
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from citylayout.core.config import LayoutConfig, RiverConfig
from citylayout.core.contracts import DecorationType, Plaza
from citylayout.core.prng import seeded_random
from citylayout.layout.packer import ClusterPlacement
from citylayout.layout.partitioner import Cluster
from citylayout.layout.plazas import build_plazas, decorate_plaza, decorate_plazas
from citylayout.layout.river import place_bridges, place_river
from citylayout.layout.zones import aggregate_district_zones

from factories import make_building


def _placement(cell):
    center = (cell[0] * 202.0, cell[1] * 202.0)
    return ClusterPlacement(cluster=Cluster(district_id="x", blocks=()), origin=cell,
                            plaza_cell=cell, plaza_center=center, blocks=())


class TestPlazas:
    """Test suite for plaza placement and decoration."""

    def test_one_plaza_per_cluster(self):
        plazas = build_plazas([_placement((0, 0)), _placement((0, -4))])

        assert len(plazas) == 2
        assert plazas[0].position == (0.0, 0.0, 0.0)
        assert plazas[1].position == (0.0, 0.0, -808.0)
        assert plazas[0].size == pytest.approx(142.4)
        assert plazas[0].variant == seeded_random(997)
        assert plazas[1].variant == seeded_random(2 * 997)

    def test_only_first_plaza_has_fountain(self):
        plazas = build_plazas([_placement((0, 0)), _placement((4, 0)), _placement((-4, 0))])
        decorations = decorate_plazas(plazas)

        fountains = [d for d in decorations if d.type == DecorationType.FOUNTAIN]
        assert len(fountains) == 1
        assert fountains[0].position == plazas[0].position

    def test_tree_and_bench_counts(self):
        plaza = Plaza(position=(10.0, 0.0, 20.0), size=142.4, variant=0.5)
        for index in range(6):
            items = decorate_plaza(plaza, index)
            trees = [d for d in items if d.type == DecorationType.TREE]
            benches = [d for d in items if d.type == DecorationType.BENCH]
            assert 4 <= len(trees) <= 8
            assert 2 <= len(benches) <= 3

    def test_items_stay_inside_plaza(self):
        plaza = Plaza(position=(10.0, 0.0, 20.0), size=142.4, variant=0.5)
        for item in decorate_plaza(plaza, 2):
            x, _, z = item.position
            assert abs(x - 10.0) <= 71.2 * 0.8
            assert abs(z - 20.0) <= 71.2 * 0.8

    def test_no_plazas(self):
        assert build_plazas([]) == ()
        assert decorate_plazas(()) == ()


class TestRiver:
    """Test suite for the river and its bridges."""

    def test_empty_city_keeps_margin(self):
        river = place_river([])
        assert river.min_x == -80.0
        assert river.max_x == 80.0
        assert river.center_z == 542.0
        assert river.width == 40.0

    def test_span_covers_buildings(self):
        buildings = [make_building("a", "backend", -300.0, 0.0), make_building("b", "backend", 450.0, 0.0)]
        river = place_river(buildings)
        assert (river.min_x, river.max_x) == (-380.0, 530.0)

    def test_bridges_evenly_spaced(self):
        bridges = place_bridges(place_river([]))

        assert [b.position[0] for b in bridges] == [-40.0, 0.0, 40.0]
        for bridge in bridges:
            assert bridge.position[2] == 542.0
            assert bridge.width == 60.0
            assert bridge.rotation == pytest.approx(math.pi / 2)

    def test_bridge_count_from_config(self):
        config = LayoutConfig(river=RiverConfig(bridge_count=1))
        bridges = place_bridges(place_river([], config), config)
        assert len(bridges) == 1
        assert bridges[0].position[0] == 0.0


class TestDistrictZones:
    """Test suite for aggregate_district_zones."""

    def test_bounds_center_and_population(self):
        buildings = [
            make_building("a", "backend", 0.0, 0.0),
            make_building("b", "backend", 100.0, -50.0),
            make_building("c", "frontend", 500.0, 500.0),
        ]
        zones = aggregate_district_zones(buildings)

        assert [z.id for z in zones] == ["backend", "frontend"]
        backend = zones[0]
        assert backend.name == "Backend Bay"
        assert backend.population == 2
        assert (backend.bounds.min_x, backend.bounds.max_x) == (0.0, 100.0)
        assert (backend.bounds.min_z, backend.bounds.max_z) == (-50.0, 0.0)
        assert backend.center == (50.0, 0.0, -25.0)

    def test_order_follows_first_building(self):
        buildings = [
            make_building("a", "mobile", 0.0, 0.0),
            make_building("b", "downtown", 10.0, 0.0),
            make_building("c", "mobile", 20.0, 0.0),
        ]
        assert [z.id for z in aggregate_district_zones(buildings)] == ["mobile", "downtown"]

    def test_unknown_district_gets_fallback_label(self):
        with patch('citylayout.layout.zones.logger') as mock_logger:
            zones = aggregate_district_zones([make_building("a", "space", 0.0, 0.0)])
            mock_logger.warning.assert_called_once()

        assert zones[0].name == "Unknown District"
        assert zones[0].color == "#888888"

    def test_empty(self):
        assert aggregate_district_zones([]) == ()
