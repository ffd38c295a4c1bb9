#!/usr/bin/env python3
"""
Layout Benchmark CLI
====================

Generates cities from synthetic developer records and reports phase timings.

Usage Examples
--------------

Time the default pipeline on three city sizes:
    python scripts/benchmark_layout.py --records 100 1000 5000

Run with strict output validation and a custom configuration:
    python scripts/benchmark_layout.py --records 2000 --validate --strictness high --config layout.yaml

Export the last city's buildings as CSV:
    python scripts/benchmark_layout.py --records 500 --buildings-csv buildings.csv
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from citylayout.core.config import LayoutConfig, create_config_from_file
from citylayout.core.contracts import DeveloperRecord
from citylayout.layout.generator import CityLayoutGenerator
from citylayout.metrics.performance_tracker import PerformanceTracker
from citylayout.validation.frames import buildings_to_geodataframe

LANGUAGES = [
    "Python", "TypeScript", "JavaScript", "Go", "Rust", "Java", "Swift", "Kotlin",
    "C++", "C", "Shell", "HTML", "Ruby", "Lua", "Markdown", None,
]


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure logging for the script.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path to write logs
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers
    )


def synthetic_records(count: int, seed: int = 42, expanded_every: int = 0) -> List[DeveloperRecord]:
    """
    Heavy-tailed synthetic developer records.

    Contributions and stars are drawn log-normally so a few developers
    dominate, as on real leaderboards.
    """
    rng = np.random.RandomState(seed)
    contributions = rng.lognormal(mean=6.0, sigma=1.2, size=count).astype(int)
    stars = rng.lognormal(mean=4.0, sigma=2.0, size=count).astype(int)
    repos = rng.randint(0, 250, size=count)
    languages = rng.randint(len(LANGUAGES), size=count)

    records = []
    for i in range(count):
        extra = {}
        if expanded_every and i % expanded_every == 0:
            extra = dict(
                contributions_total=int(contributions[i] * rng.uniform(2, 12)) + 1,
                contribution_years=int(rng.randint(1, 12)),
                total_prs=int(rng.randint(0, 2000)),
                total_reviews=int(rng.randint(0, 1500)),
                repos_contributed_to=int(rng.randint(0, 120)),
                followers=int(rng.lognormal(3.0, 2.0)),
                following=int(rng.randint(0, 400)),
                organizations_count=int(rng.randint(0, 10)),
                account_age_years=float(rng.uniform(1, 15)),
                current_streak=int(rng.randint(0, 150)),
                active_days_last_year=int(rng.randint(0, 365)),
                language_diversity=int(rng.randint(1, 12)),
                top_repo_stars=int(stars[i]),
            )
        records.append(DeveloperRecord(
            login=f"synthetic-{i:06d}",
            contributions=int(contributions[i]),
            total_stars=int(stars[i]),
            public_repos=int(repos[i]),
            primary_language=LANGUAGES[languages[i]],
            **extra,
        ))
    return records


def parse_args():
    parser = argparse.ArgumentParser(
        description="Benchmark city layout generation on synthetic records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--records', type=int, nargs='+', default=[100, 1000],
                        help='City sizes to generate (default: 100 1000)')
    parser.add_argument('--runs', type=int, default=3, help='Runs per city size (default: 3)')
    parser.add_argument('--seed', type=int, default=42, help='Seed for synthetic records')
    parser.add_argument('--expanded-every', type=int, default=3,
                        help='Give every n-th record lifetime metrics, 0 disables (default: 3)')
    parser.add_argument('--config', type=str, help='YAML or JSON layout configuration')

    validation_group = parser.add_argument_group('Validation')
    validation_group.add_argument('--validate', action='store_true', help='Enable output validation')
    validation_group.add_argument('--strictness', choices=['low', 'medium', 'high'], default='medium',
                                  help='Validation strictness (default: medium)')

    output_group = parser.add_argument_group('Output')
    output_group.add_argument('--summary-json', type=str, help='Write timing summary as JSON')
    output_group.add_argument('--buildings-csv', type=str, help="Write the last city's buildings as CSV")
    output_group.add_argument('--log-level', default='INFO', help='Logging level (default: INFO)')
    output_group.add_argument('--log-file', type=str, help='Optional log file')
    return parser.parse_args()


def main():
    """Main entry point for the layout benchmark."""
    args = parse_args()
    setup_logging(args.log_level, args.log_file)
    logger = logging.getLogger(__name__)

    config = create_config_from_file(args.config) if args.config else LayoutConfig()
    config.validation.enable_output_validation = args.validate
    config.validation.validation_strictness = args.strictness
    config.logging.log_run_summary = False
    config.log_configuration_summary()

    tracker = PerformanceTracker(config.performance.max_history_size)
    generator = CityLayoutGenerator(config, performance_tracker=tracker)

    layout = None
    for size in args.records:
        records = synthetic_records(size, args.seed, args.expanded_every)
        logger.info(f"Generating {args.runs} cities of {size} developers")
        for _ in range(args.runs):
            try:
                layout = generator.generate(records)
            except Exception as e:
                logger.error(f"Layout generation failed: {e}", exc_info=True)
                sys.exit(1)
        logger.info(f"  {layout.summary()}")

    tracker.log_performance_summary()

    if args.summary_json:
        stats = tracker.get_summary_stats()
        with open(args.summary_json, 'w') as f:
            json.dump(stats, f, indent=2)
        logger.info(f"Saved timing summary to {args.summary_json}")

    if args.buildings_csv and layout is not None:
        frame = buildings_to_geodataframe(layout)
        frame.drop(columns='geometry').to_csv(args.buildings_csv, index=False)
        logger.info(f"Saved {len(frame)} buildings to {args.buildings_csv}")


if __name__ == '__main__':
    main()
