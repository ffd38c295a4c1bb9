#!/usr/bin/env python3
"""
Configuration System for City Layout Generation

Centralized configuration management with type-safe sections,
validation and defaults.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from .contracts import MAX_HEIGHT, MIN_HEIGHT

logger = logging.getLogger(__name__)


@dataclass
class ScoringConfig:
    """Height mapping and metric caps for the scoring engine."""
    min_height: float = 35.0
    max_height: float = 600.0
    legacy_contribution_cap: int = 20_000
    expanded_contribution_cap: int = 50_000
    star_cap: int = 200_000

    @property
    def height_range(self) -> float:
        return self.max_height - self.min_height


@dataclass
class PackingConfig:
    """Partitioning and grid packing parameters."""
    downtown_size: int = 50
    block_capacity: int = 16
    block_columns: int = 4
    district_radius: int = 4
    lot_size: float = 40.0
    alley_width: float = 6.0
    street_width: float = 24.0
    block_jitter: float = 3.0
    river_threshold_z: float = 500.0
    river_push: float = 60.0
    shuffle_stride: int = 7919

    @property
    def lot_pitch(self) -> float:
        """Distance between neighbouring lot centres inside a block."""
        return self.lot_size + self.alley_width

    @property
    def block_footprint(self) -> float:
        return self.block_columns * self.lot_size + (self.block_columns - 1) * self.alley_width

    @property
    def grid_step(self) -> float:
        return self.block_footprint + self.street_width


@dataclass
class DecorationConfig:
    """Props emitted around blocks, plazas and streets."""
    car_probability: float = 0.6
    car_offset: float = 6.0
    lamp_edge_offset: float = 4.0
    tree_edge_offset: float = 6.0
    sidewalk_margin: float = 8.0
    dash_length: float = 6.0
    dash_gap: float = 8.0
    dash_width: float = 2.0
    plaza_size_ratio: float = 0.8


@dataclass
class RiverConfig:
    """River band and bridge parameters."""
    width: float = 40.0
    margin: float = 80.0
    bridge_count: int = 3
    bridge_extra_width: float = 20.0


@dataclass
class ValidationConfig:
    """Post-run invariant checking."""
    enable_output_validation: bool = False
    validation_strictness: str = "medium"  # "low", "medium", "high"


@dataclass
class PerformanceConfig:
    """Phase timing for generation runs."""
    enable_phase_timing: bool = False
    max_history_size: int = 1000


@dataclass
class LoggingConfig:
    """Configuration for logging and debugging."""
    log_level: str = "INFO"
    log_run_summary: bool = True


@dataclass
class LayoutConfig:
    """
    Master configuration for city layout generation.

    Groups the tunable constants of every pipeline stage and validates
    them on construction.
    """
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    packing: PackingConfig = field(default_factory=PackingConfig)
    decorations: DecorationConfig = field(default_factory=DecorationConfig)
    river: RiverConfig = field(default_factory=RiverConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_config()

    def _validate_config(self):
        """Validate configuration parameters."""
        if not (MIN_HEIGHT <= self.scoring.min_height < self.scoring.max_height <= MAX_HEIGHT):
            raise ValueError(f"Height range must satisfy {MIN_HEIGHT} <= min_height < max_height <= {MAX_HEIGHT}")
        for cap_name in ('legacy_contribution_cap', 'expanded_contribution_cap', 'star_cap'):
            if getattr(self.scoring, cap_name) <= 0:
                raise ValueError(f"{cap_name} must be positive")

        if self.packing.downtown_size < 0:
            raise ValueError("downtown_size must be non-negative")
        if self.packing.block_capacity <= 0:
            raise ValueError("block_capacity must be positive")
        if self.packing.block_capacity > self.packing.block_columns ** 2:
            raise ValueError("block_capacity cannot exceed block_columns squared")
        if self.packing.district_radius <= 0:
            raise ValueError("district_radius must be positive")
        if self.packing.lot_size <= 0 or self.packing.alley_width < 0 or self.packing.street_width <= 0:
            raise ValueError("lot_size and street_width must be positive, alley_width non-negative")
        if self.packing.block_jitter < 0:
            raise ValueError("block_jitter must be non-negative")
        if 2 * self.packing.block_jitter >= self.packing.street_width:
            raise ValueError("block_jitter must be less than half the street width")
        if self.packing.river_push < 0:
            raise ValueError("river_push must be non-negative")

        if not (0 <= self.decorations.car_probability <= 1):
            raise ValueError("car_probability must be between 0 and 1")
        if self.decorations.dash_length <= 0 or self.decorations.dash_gap < 0:
            raise ValueError("dash_length must be positive and dash_gap non-negative")

        if self.river.width <= 0:
            raise ValueError("river width must be positive")
        if self.river.margin < 0:
            raise ValueError("river margin must be non-negative")
        if self.river.bridge_count < 0:
            raise ValueError("bridge_count must be non-negative")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging.log_level.upper() not in valid_log_levels:
            raise ValueError(f"log_level must be one of {valid_log_levels}")

        valid_strictness = ["low", "medium", "high"]
        if self.validation.validation_strictness.lower() not in valid_strictness:
            raise ValueError(f"validation_strictness must be one of {valid_strictness}")

    @property
    def river_center_z(self) -> float:
        """Z of the river centre line, between the last undeflected and first deflected row."""
        return (self.packing.river_threshold_z
                + self.packing.river_push / 2
                + self.packing.street_width / 2)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'LayoutConfig':
        """
        Create configuration from dictionary.

        Missing sections and keys fall back to defaults.
        """
        return cls(
            scoring=ScoringConfig(**config_dict.get('scoring', {})),
            packing=PackingConfig(**config_dict.get('packing', {})),
            decorations=DecorationConfig(**config_dict.get('decorations', {})),
            river=RiverConfig(**config_dict.get('river', {})),
            validation=ValidationConfig(**config_dict.get('validation', {})),
            performance=PerformanceConfig(**config_dict.get('performance', {})),
            logging=LoggingConfig(**config_dict.get('logging', {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def validate_compatibility(self) -> List[str]:
        """
        Validate configuration compatibility and return warnings.

        Returns list of warning messages for settings that still produce a
        layout but break one of its geometric guarantees.
        """
        warnings = []

        max_building_width = 14 + 24 + 2
        if self.packing.lot_pitch <= max_building_width:
            warnings.append("Lot pitch does not exceed the widest building - neighbouring buildings may touch")

        if self.river.width >= self.packing.river_push + self.packing.street_width:
            warnings.append("River is wider than the channel carved by river_push - blocks may sit in the water")

        if self.packing.downtown_size > 500:
            warnings.append("Very large downtown clusters push districts far from their origins")

        if self.validation.validation_strictness == "high" and not self.validation.enable_output_validation:
            warnings.append("High validation strictness has no effect while output validation is disabled")

        return warnings

    def log_configuration_summary(self):
        """Log a summary of the current configuration."""
        logger.info("=== LAYOUT CONFIGURATION SUMMARY ===")
        logger.info(f"Heights: [{self.scoring.min_height}, {self.scoring.max_height}]")
        logger.info(f"Packing: downtown={self.packing.downtown_size}, block_capacity={self.packing.block_capacity}, "
                    f"grid_step={self.packing.grid_step}")
        logger.info(f"River: width={self.river.width}, center_z={self.river_center_z}, bridges={self.river.bridge_count}")
        logger.info(f"Validation: enabled={self.validation.enable_output_validation}, "
                    f"strictness={self.validation.validation_strictness}")

        warnings = self.validate_compatibility()
        if warnings:
            logger.warning("Configuration warnings:")
            for warning in warnings:
                logger.warning(f"  - {warning}")


DEFAULT_CONFIG = LayoutConfig()


def get_default_config() -> LayoutConfig:
    """Get default configuration instance."""
    return DEFAULT_CONFIG


def create_config_from_file(config_path: str) -> LayoutConfig:
    """
    Create configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        LayoutConfig instance
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
    elif config_path.endswith('.json'):
        with open(config_path, 'r') as f:
            config_dict = json.load(f)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")

    return LayoutConfig.from_dict(config_dict)


def save_config_to_file(config: LayoutConfig, config_path: str):
    """
    Save configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        config_path: Path to save configuration
    """
    config_dict = config.to_dict()

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)
    elif config_path.endswith('.json'):
        with open(config_path, 'w') as f:
            json.dump(config_dict, f, indent=2)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")
