"""Partition ranked records into a downtown cluster and per-district clusters.

Records are ranked by composite score once. The top of the ranking forms
downtown; the rest are grouped by district, chunked into fixed-size blocks
and each block is shuffled deterministically so heights inside a block look
organic while block order still follows the ranking.
"""

import math
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..core.config import PackingConfig
from ..core.contracts import DeveloperRecord
from ..core.prng import seeded_random
from ..districts import DOWNTOWN_ID, SKILL_DISTRICTS, resolve_district
from ..scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Block:
    """Up to ``block_capacity`` records placed together on one grid cell."""
    records: Tuple[DeveloperRecord, ...]
    seed: int


@dataclass(frozen=True)
class Cluster:
    """All blocks of one district, in placement order."""
    district_id: str
    blocks: Tuple[Block, ...]

    @property
    def record_count(self) -> int:
        return sum(len(block.records) for block in self.blocks)


@dataclass(frozen=True)
class Partition:
    downtown: Cluster
    districts: Tuple[Cluster, ...]

    @property
    def clusters(self) -> Tuple[Cluster, ...]:
        """Non-empty clusters, downtown first."""
        head = (self.downtown,) if self.downtown.blocks else ()
        return head + self.districts


class BlockSeedCounter:
    """Monotonically increasing block seed, scoped to one run."""

    def __init__(self, start: int = 1):
        self._start = start
        self._next = start

    def next(self) -> int:
        seed = self._next
        self._next += 1
        return seed

    @property
    def issued(self) -> int:
        return self._next - self._start


def seeded_shuffle(items: Sequence, seed: int, stride: int = 7919) -> List:
    """Fisher-Yates shuffle driven by ``seeded_random(seed + i * stride)``."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(math.floor(seeded_random(seed + i * stride) * (i + 1)))
        result[i], result[j] = result[j], result[i]
    return result


def rank_records(records: Sequence[DeveloperRecord], scorer: ScoringEngine) -> List[DeveloperRecord]:
    """Stable sort by composite score, highest first."""
    return sorted(records, key=lambda r: -scorer.composite(r))


def _chunk_blocks(records: Sequence[DeveloperRecord], config: PackingConfig,
                  counter: BlockSeedCounter) -> Tuple[Block, ...]:
    blocks = []
    for start in range(0, len(records), config.block_capacity):
        seed = counter.next()
        chunk = seeded_shuffle(records[start:start + config.block_capacity], seed, config.shuffle_stride)
        blocks.append(Block(records=tuple(chunk), seed=seed))
    return tuple(blocks)


def _district_order(groups: Dict[str, List[DeveloperRecord]]) -> List[str]:
    """Canonical district order first, then unknown ids by first appearance."""
    known = [d.district_id for d in SKILL_DISTRICTS if d.district_id in groups]
    unknown = [district_id for district_id in groups if district_id not in known]
    return known + unknown


def partition_records(records: Sequence[DeveloperRecord], scorer: ScoringEngine,
                      config: PackingConfig) -> Partition:
    """
    Split records into downtown and district clusters.

    Args:
        records: Input records (input order breaks composite ties)
        scorer: Scoring engine for this run
        config: Packing configuration

    Returns:
        Partition with blocks already shuffled and seeded
    """
    ranked = rank_records(records, scorer)
    downtown_records = ranked[:config.downtown_size]
    rest = ranked[config.downtown_size:]

    counter = BlockSeedCounter()
    downtown = Cluster(district_id=DOWNTOWN_ID, blocks=_chunk_blocks(downtown_records, config, counter))

    groups: Dict[str, List[DeveloperRecord]] = {}
    for record in rest:
        groups.setdefault(resolve_district(record), []).append(record)

    districts = tuple(
        Cluster(district_id=district_id, blocks=_chunk_blocks(groups[district_id], config, counter))
        for district_id in _district_order(groups)
    )

    logger.debug(f"Partitioned {len(records)} records: downtown={len(downtown_records)}, "
                 f"districts={len(districts)}, blocks={counter.issued}")
    return Partition(downtown=downtown, districts=districts)
