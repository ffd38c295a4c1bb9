"""Main orchestrator for city layout generation.

This module implements the CityLayoutGenerator class that runs scoring,
partitioning, grid packing, block materialization, roads, plazas, the
river and district zones in a fixed order and assembles the CityLayout.
"""

import time
import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..core.config import LayoutConfig
from ..core.contracts import CityLayout, Decoration, DeveloperRecord
from ..metrics.performance_tracker import PerformanceTracker
from ..scoring.engine import ScoreContext, ScoringEngine
from .materializer import BlockMaterializer
from .packer import GridSpiralPacker, OccupiedGrid
from .partitioner import partition_records
from .plazas import build_plazas, decorate_plazas
from .river import place_bridges, place_river
from .roads import generate_road_markings
from .zones import aggregate_district_zones

logger = logging.getLogger(__name__)


class CityLayoutGenerator:
    """Main API for turning developer records into a city layout.

    Orchestrates a run by:
    1. Scoring every record against the run's maxima
    2. Partitioning ranked records into downtown and district clusters
    3. Packing clusters onto the grid around their origins
    4. Materializing buildings and street furniture per block
    5. Adding road markings, plazas, the river, bridges and district zones

    The generator holds no state between runs besides optional timings.
    """

    def __init__(self, config: Optional[LayoutConfig] = None,
                 performance_tracker: Optional[PerformanceTracker] = None):
        """Initialize generator.

        Args:
            config: Layout configuration (defaults when omitted)
            performance_tracker: Optional tracker; created when phase timing is enabled
        """
        self.config = config or LayoutConfig()
        if performance_tracker is None and self.config.performance.enable_phase_timing:
            performance_tracker = PerformanceTracker(self.config.performance.max_history_size)
        self.performance_tracker = performance_tracker

    def _start(self, phase: str):
        if self.performance_tracker:
            self.performance_tracker.start_operation(phase)

    def _end(self, phase: str):
        if self.performance_tracker:
            self.performance_tracker.end_operation(phase)

    @staticmethod
    def _input_ranks(records: Sequence[DeveloperRecord]) -> Dict[str, int]:
        """1-based input position per login; the first occurrence wins."""
        ranks = {}
        for position, record in enumerate(records, start=1):
            ranks.setdefault(record.login, position)
        return ranks

    def generate(self, records: Sequence[DeveloperRecord]) -> CityLayout:
        """Generate a complete layout for ``records``.

        Args:
            records: Developer records; input order breaks composite-score ties

        Returns:
            CityLayout with one building per record

        Raises:
            LayoutValidationError: If output validation is enabled and fails
        """
        records = list(records)
        run_start = time.perf_counter()

        duplicates = [login for login, count in Counter(r.login for r in records).items() if count > 1]
        if duplicates:
            logger.warning(f"{len(duplicates)} duplicate login(s) in input, e.g. '{duplicates[0]}'")

        self._start('scoring')
        scorer = ScoringEngine(ScoreContext.from_records(records), self.config.scoring)
        self._end('scoring')

        self._start('partition')
        partition = partition_records(records, scorer, self.config.packing)
        self._end('partition')

        self._start('packing')
        grid = OccupiedGrid()
        placements = GridSpiralPacker(self.config.packing).pack(partition, grid)
        self._end('packing')

        self._start('materialize')
        materializer = BlockMaterializer(scorer, self.config.packing, self.config.decorations,
                                         self._input_ranks(records))
        buildings = []
        decorations: List[Decoration] = []
        placed_blocks = [placed for placement in placements for placed in placement.blocks]
        for placed in placed_blocks:
            output = materializer.materialize(placed)
            buildings.extend(output.buildings)
            decorations.extend(output.decorations)
        self._end('materialize')

        self._start('roads')
        decorations.extend(generate_road_markings(placed_blocks, self.config.packing, self.config.decorations))
        self._end('roads')

        self._start('plazas')
        plazas = build_plazas(placements, self.config.packing, self.config.decorations)
        decorations.extend(decorate_plazas(plazas))
        self._end('plazas')

        self._start('river')
        river = place_river(buildings, self.config)
        bridges = place_bridges(river, self.config)
        self._end('river')

        self._start('zones')
        zones = aggregate_district_zones(buildings)
        self._end('zones')

        layout = CityLayout(
            buildings=tuple(buildings),
            plazas=plazas,
            decorations=tuple(decorations),
            river=river,
            bridges=bridges,
            district_zones=zones,
        )

        if self.config.validation.enable_output_validation:
            self._start('validation')
            self._validate(layout, records)
            self._end('validation')

        duration = time.perf_counter() - run_start
        if self.performance_tracker:
            self.performance_tracker.record_run(len(records), len(layout.buildings),
                                                len(layout.decorations), duration)

        if self.config.logging.log_run_summary:
            logger.info(f"Generated city: {len(layout.buildings)} buildings in {len(placed_blocks)} blocks, "
                        f"{len(layout.plazas)} plazas, {len(layout.decorations)} decorations, "
                        f"{len(layout.district_zones)} districts ({duration * 1000:.1f}ms)")
        return layout

    def _validate(self, layout: CityLayout, records: Sequence[DeveloperRecord]):
        from ..validation.validators import LayoutValidationError, LayoutValidator

        valid, failures = LayoutValidator(self.config).validate(layout, records)
        if not valid:
            logger.error(f"Layout validation failed with {len(failures)} issue(s)")
            raise LayoutValidationError(failures)


def generate_city_layout(records: Sequence[DeveloperRecord],
                         config: Optional[LayoutConfig] = None) -> CityLayout:
    """Generate a city layout with a one-off generator."""
    return CityLayoutGenerator(config).generate(records)
