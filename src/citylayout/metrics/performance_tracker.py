#!/usr/bin/env python3
"""
Performance Tracker Module

Phase timing for layout generation runs. Timings are observational only
and never feed back into the layout.
"""

import time
import logging
from typing import Any, Dict, List

import numpy as np

logger = logging.getLogger(__name__)


class PerformanceTracker:
    """
    Records how long each pipeline phase takes across runs.

    Includes bounds checking to prevent unlimited memory growth.
    """

    def __init__(self, max_history_size: int = 1000):
        """
        Initialize performance tracker with configurable bounds.

        Args:
            max_history_size: Maximum number of entries to keep per phase and run list
        """
        self.max_history_size = max_history_size
        self.reset()

    def reset(self):
        """Reset all performance metrics."""
        self.start_time = time.perf_counter()
        self.operation_times: Dict[str, List[float]] = {}
        self.run_metrics: List[Dict[str, Any]] = []
        self._current_ops: Dict[str, float] = {}

    def start_operation(self, operation_name: str):
        """Start timing an operation."""
        self.operation_times.setdefault(operation_name, [])
        self._current_ops[operation_name] = time.perf_counter()

    def end_operation(self, operation_name: str):
        """End timing an operation."""
        start = self._current_ops.pop(operation_name, None)
        if start is None:
            return
        times = self.operation_times[operation_name]
        times.append(time.perf_counter() - start)
        if len(times) > self.max_history_size:
            self.operation_times[operation_name] = times[-self.max_history_size:]

    def record_run(self, record_count: int, building_count: int, decoration_count: int, duration: float):
        """Record totals for one completed layout run."""
        self.run_metrics.append({
            'records': record_count,
            'buildings': building_count,
            'decorations': decoration_count,
            'duration': duration,
        })
        if len(self.run_metrics) > self.max_history_size:
            self.run_metrics = self.run_metrics[-self.max_history_size:]

    def get_summary_stats(self) -> Dict[str, Any]:
        """Get performance summary."""
        total_time = time.perf_counter() - self.start_time

        operation_stats = {}
        for op_name, times in self.operation_times.items():
            if times:
                arr = np.asarray(times)
                operation_stats[op_name] = {
                    'count': int(arr.size),
                    'total_time': float(arr.sum()),
                    'avg_time': float(arr.mean()),
                    'p95_time': float(np.percentile(arr, 95)),
                    'max_time': float(arr.max()),
                    'pct_total': float(arr.sum() / total_time * 100) if total_time > 0 else 0.0,
                }

        records_processed = sum(m['records'] for m in self.run_metrics)
        run_time = sum(m['duration'] for m in self.run_metrics)

        return {
            'total_time': total_time,
            'total_runs': len(self.run_metrics),
            'records_processed': records_processed,
            'records_per_second': records_processed / run_time if run_time > 0 else 0,
            'operation_stats': operation_stats,
            'run_metrics': list(self.run_metrics),
        }

    def log_performance_summary(self):
        """Log a human-readable performance summary."""
        stats = self.get_summary_stats()

        logger.info("=== PERFORMANCE SUMMARY ===")
        logger.info(f"Total runs: {stats['total_runs']}")
        logger.info(f"Records processed: {stats['records_processed']}")
        logger.info(f"Records per second: {stats['records_per_second']:.1f}")

        if stats['operation_stats']:
            logger.info("Phases by time:")
            sorted_ops = sorted(stats['operation_stats'].items(),
                                key=lambda x: x[1]['total_time'], reverse=True)
            for op_name, op_stats in sorted_ops:
                logger.info(f"  {op_name}: {op_stats['total_time']:.4f}s "
                            f"(avg {op_stats['avg_time'] * 1000:.2f}ms, p95 {op_stats['p95_time'] * 1000:.2f}ms)")
