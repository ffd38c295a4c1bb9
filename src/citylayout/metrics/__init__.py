"""
Performance Metrics Module

Phase timing for the layout pipeline.
"""

from .performance_tracker import PerformanceTracker

__all__ = [
    'PerformanceTracker',
]
