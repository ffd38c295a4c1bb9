#!/usr/bin/env python3
"""
Unit tests for layout validation.
"""

import os
import sys
from dataclasses import replace
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from citylayout.core.config import LayoutConfig, ValidationConfig
from citylayout.core.contracts import DecorationType
from citylayout.layout.generator import generate_city_layout
from citylayout.validation.validators import (
    LayoutValidationError, LayoutValidator, validate_block_capacity, validate_cardinality,
    validate_dimension_bounds, validate_downtown_precedence, validate_no_overlap,
    validate_plaza_decorations, validate_unique_cells, validate_zone_containment,
)

from factories import make_records


@pytest.fixture(scope="module")
def records():
    return make_records(180, seed=13, expanded_every=4)


@pytest.fixture(scope="module")
def layout(records):
    return generate_city_layout(records)


def _validator(strictness):
    return LayoutValidator(LayoutConfig(validation=ValidationConfig(validation_strictness=strictness)))


class TestChecksOnGeneratedLayout:
    """Every check passes on a freshly generated layout."""

    def test_all_checks_pass(self, layout, records):
        assert validate_cardinality(layout, records) == (True, "Valid")
        assert validate_dimension_bounds(layout) == (True, "Valid")
        assert validate_block_capacity(layout) == (True, "Valid")
        assert validate_unique_cells(layout) == (True, "Valid")
        assert validate_no_overlap(layout) == (True, "Valid")
        assert validate_zone_containment(layout) == (True, "Valid")
        assert validate_downtown_precedence(layout, records) == (True, "Valid")
        assert validate_plaza_decorations(layout) == (True, "Valid")

    def test_validator_high_strictness(self, layout, records):
        valid, failures = _validator("high").validate(layout, records)
        assert valid
        assert failures == []


class TestBrokenLayouts:
    """Each check catches the invariant it guards."""

    def test_missing_building(self, layout, records):
        broken = replace(layout, buildings=layout.buildings[:-1])
        valid, reason = validate_cardinality(broken, records)
        assert not valid
        assert "count" in reason

    def test_renamed_building(self, layout, records):
        buildings = (replace(layout.buildings[0], login="impostor"),) + layout.buildings[1:]
        valid, reason = validate_cardinality(replace(layout, buildings=buildings), records)
        assert not valid
        assert "impostor" in reason

    def test_height_bounds_against_tighter_config(self, layout):
        config = LayoutConfig.from_dict({'scoring': {'min_height': 35.0, 'max_height': 40.0}})
        valid, reason = validate_dimension_bounds(layout, config)
        assert not valid
        assert "Height" in reason

    def test_overfull_block(self, layout):
        valid, _ = validate_block_capacity(layout, capacity=1)
        assert not valid

    def test_overlapping_buildings(self, layout):
        first, second = layout.buildings[0], layout.buildings[1]
        moved = replace(second, position=first.position)
        broken = replace(layout, buildings=(first, moved) + layout.buildings[2:])

        valid, reason = validate_no_overlap(broken)
        assert not valid
        assert first.login in reason

    def test_mixed_block(self, layout):
        first = layout.buildings[0]
        intruder = replace(layout.buildings[-1], block_cell=first.block_cell)
        broken = replace(layout, buildings=layout.buildings[:-1] + (intruder,))
        assert intruder.district != first.district
        valid, _ = validate_unique_cells(broken)
        assert not valid

    def test_building_on_plaza(self, layout):
        plaza = layout.plazas[0]
        squatter = replace(layout.buildings[0], position=plaza.position)
        broken = replace(layout, buildings=(squatter,) + layout.buildings[1:])

        valid, reason = validate_unique_cells(broken)
        assert not valid
        assert squatter.login in reason

    def test_missing_zone(self, layout):
        broken = replace(layout, district_zones=layout.district_zones[1:])
        valid, reason = validate_zone_containment(broken)
        assert not valid
        assert "no zone" in reason

    def test_downtown_membership(self, layout, records):
        demoted = tuple(
            replace(b, district="backend") if b.district == "downtown" else b
            for b in layout.buildings
        )
        valid, _ = validate_downtown_precedence(replace(layout, buildings=demoted), records)
        assert not valid

    def test_missing_fountain(self, layout):
        decorations = tuple(d for d in layout.decorations if d.type != DecorationType.FOUNTAIN)
        valid, reason = validate_plaza_decorations(replace(layout, decorations=decorations))
        assert not valid
        assert "fountain" in reason


class TestLayoutValidator:
    """Test suite for strictness levels."""

    def test_low_strictness_skips_geometry(self, layout, records):
        first, second = layout.buildings[0], layout.buildings[1]
        broken = replace(layout, buildings=(first, replace(second, position=first.position)) + layout.buildings[2:])

        assert _validator("low").validate(broken, records) == (True, [])

        valid, failures = _validator("medium").validate(broken, records)
        assert not valid
        assert any(f.startswith("no_overlap") for f in failures)

    def test_validate_or_raise(self, layout, records):
        broken = replace(layout, buildings=layout.buildings[:-1])
        with pytest.raises(LayoutValidationError) as excinfo:
            _validator("low").validate_or_raise(broken, records)
        assert excinfo.value.reasons[0].startswith("cardinality")

    def test_failures_are_logged(self, layout, records):
        broken = replace(layout, buildings=layout.buildings[:-1])
        with patch('citylayout.validation.validators.logger') as mock_logger:
            _validator("low").validate(broken, records)
            mock_logger.warning.assert_called()
