#!/usr/bin/env python3
"""
Unit tests for Configuration System.
"""

import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from citylayout.core.config import (
    DecorationConfig, LayoutConfig, LoggingConfig, PackingConfig, RiverConfig,
    ScoringConfig, ValidationConfig, create_config_from_file, get_default_config,
    save_config_to_file,
)


class TestLayoutConfig(unittest.TestCase):
    """Test cases for LayoutConfig class."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = LayoutConfig()

    def test_default_initialization(self):
        """Test default configuration initialization."""
        # Scoring
        self.assertEqual(self.config.scoring.min_height, 35.0)
        self.assertEqual(self.config.scoring.max_height, 600.0)
        self.assertEqual(self.config.scoring.height_range, 565.0)

        # Packing
        self.assertEqual(self.config.packing.downtown_size, 50)
        self.assertEqual(self.config.packing.block_capacity, 16)

        # Validation and performance are off by default
        self.assertFalse(self.config.validation.enable_output_validation)
        self.assertFalse(self.config.performance.enable_phase_timing)

    def test_derived_geometry(self):
        """Test derived lot, block and grid sizes."""
        self.assertEqual(self.config.packing.lot_pitch, 46.0)
        self.assertEqual(self.config.packing.block_footprint, 178.0)
        self.assertEqual(self.config.packing.grid_step, 202.0)
        self.assertEqual(self.config.river_center_z, 542.0)

    def test_validation_heights(self):
        """Test validation of the height range."""
        with self.assertRaises(ValueError):
            LayoutConfig(scoring=ScoringConfig(min_height=0))

        with self.assertRaises(ValueError):
            LayoutConfig(scoring=ScoringConfig(min_height=700.0))

        # Building heights are bounded to [35, 600] regardless of config
        with self.assertRaises(ValueError):
            LayoutConfig(scoring=ScoringConfig(min_height=10.0))

        with self.assertRaises(ValueError):
            LayoutConfig(scoring=ScoringConfig(max_height=800.0))

        narrowed = LayoutConfig(scoring=ScoringConfig(min_height=100.0, max_height=300.0))
        self.assertEqual(narrowed.scoring.height_range, 200.0)

        with self.assertRaises(ValueError):
            LayoutConfig(scoring=ScoringConfig(star_cap=0))

    def test_validation_packing(self):
        """Test validation of packing parameters."""
        with self.assertRaises(ValueError):
            LayoutConfig(packing=PackingConfig(block_capacity=0))

        with self.assertRaises(ValueError):
            LayoutConfig(packing=PackingConfig(block_capacity=17))

        with self.assertRaises(ValueError):
            LayoutConfig(packing=PackingConfig(downtown_size=-1))

        with self.assertRaises(ValueError):
            LayoutConfig(packing=PackingConfig(block_jitter=12.0))

    def test_validation_decorations_and_river(self):
        """Test validation of decoration and river parameters."""
        with self.assertRaises(ValueError):
            LayoutConfig(decorations=DecorationConfig(car_probability=1.5))

        with self.assertRaises(ValueError):
            LayoutConfig(river=RiverConfig(width=0))

        with self.assertRaises(ValueError):
            LayoutConfig(river=RiverConfig(bridge_count=-1))

    def test_validation_logging_level(self):
        """Test validation of logging level."""
        with self.assertRaises(ValueError):
            LayoutConfig(logging=LoggingConfig(log_level="INVALID"))

        config = LayoutConfig(logging=LoggingConfig(log_level="DEBUG"))
        self.assertEqual(config.logging.log_level, "DEBUG")

    def test_validation_strictness(self):
        """Test validation of validation strictness."""
        with self.assertRaises(ValueError):
            LayoutConfig(validation=ValidationConfig(validation_strictness="invalid"))

        config = LayoutConfig(validation=ValidationConfig(validation_strictness="high"))
        self.assertEqual(config.validation.validation_strictness, "high")

    def test_to_dict_and_from_dict(self):
        """Test conversion to and from dictionary."""
        config_dict = self.config.to_dict()
        self.assertIn('scoring', config_dict)
        self.assertIn('packing', config_dict)
        self.assertIn('river', config_dict)

        new_config = LayoutConfig.from_dict(config_dict)
        self.assertEqual(new_config, self.config)

    def test_from_partial_dict(self):
        """Missing sections fall back to defaults."""
        config = LayoutConfig.from_dict({'packing': {'downtown_size': 10}})
        self.assertEqual(config.packing.downtown_size, 10)
        self.assertEqual(config.packing.block_capacity, 16)
        self.assertEqual(config.river.width, 40.0)

    def test_validate_compatibility(self):
        """Test configuration compatibility warnings."""
        self.assertEqual(self.config.validate_compatibility(), [])

        wide_river = LayoutConfig(river=RiverConfig(width=100.0))
        warnings = wide_river.validate_compatibility()
        self.assertTrue(any('River' in w for w in warnings))

        idle_strictness = LayoutConfig(validation=ValidationConfig(validation_strictness="high"))
        warnings = idle_strictness.validate_compatibility()
        self.assertTrue(any('strictness' in w for w in warnings))

    def test_log_configuration_summary(self):
        """Test logging configuration summary."""
        with patch('citylayout.core.config.logger') as mock_logger:
            self.config.log_configuration_summary()
            mock_logger.info.assert_called()
            mock_logger.warning.assert_not_called()

    def test_get_default_config(self):
        self.assertEqual(get_default_config(), LayoutConfig())


class TestConfigFileOperations(unittest.TestCase):
    """Test cases for configuration file operations."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = LayoutConfig(packing=PackingConfig(downtown_size=25))
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def test_save_config_to_json(self):
        """Test saving configuration to JSON file."""
        json_path = os.path.join(self.temp_dir, 'config.json')
        save_config_to_file(self.config, json_path)

        with open(json_path, 'r') as f:
            data = json.load(f)
        self.assertEqual(data['packing']['downtown_size'], 25)

    def test_json_round_trip(self):
        """Test loading configuration from JSON file."""
        json_path = os.path.join(self.temp_dir, 'config.json')
        save_config_to_file(self.config, json_path)

        loaded = create_config_from_file(json_path)
        self.assertEqual(loaded.packing.downtown_size, 25)

    def test_yaml_round_trip(self):
        """Test saving and loading YAML."""
        yaml_path = os.path.join(self.temp_dir, 'config.yaml')
        save_config_to_file(self.config, yaml_path)

        loaded = create_config_from_file(yaml_path)
        self.assertEqual(loaded, self.config)

    def test_empty_yaml_gives_defaults(self):
        yaml_path = os.path.join(self.temp_dir, 'empty.yml')
        with open(yaml_path, 'w') as f:
            f.write('')
        self.assertEqual(create_config_from_file(yaml_path), LayoutConfig())

    def test_create_config_from_nonexistent_file(self):
        """Test loading from nonexistent file."""
        with self.assertRaises(FileNotFoundError):
            create_config_from_file(os.path.join(self.temp_dir, 'nonexistent.json'))

    def test_invalid_file_extension(self):
        """Test loading from file with invalid extension."""
        invalid_path = os.path.join(self.temp_dir, 'config.txt')
        with open(invalid_path, 'w') as f:
            f.write('invalid')

        with self.assertRaises(ValueError):
            create_config_from_file(invalid_path)

        with self.assertRaises(ValueError):
            save_config_to_file(self.config, invalid_path)


if __name__ == '__main__':
    unittest.main()
