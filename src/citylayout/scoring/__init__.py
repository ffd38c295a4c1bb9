"""
Scoring Module

Composite metric scoring and building dimension formulas.
"""

from .engine import (
    ScoreContext, ScoringEngine, calc_building_dims,
    legacy_composite, expanded_composite, calc_width, calc_depth, calc_lit_fraction,
)

__all__ = [
    'ScoreContext',
    'ScoringEngine',
    'calc_building_dims',
    'legacy_composite',
    'expanded_composite',
    'calc_width',
    'calc_depth',
    'calc_lit_fraction',
]
