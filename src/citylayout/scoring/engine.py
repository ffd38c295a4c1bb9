#!/usr/bin/env python3
"""
Scoring Engine

Maps raw developer metrics to building dimensions. Each metric is
normalized against a capped maximum, compressed with a power curve and
combined with fixed weights into a composite score that drives height.
Width, depth and lit fraction use their own weighted composites.

Two modes exist: a legacy 3-factor composite for records that only carry
contributions/stars/repos, and an expanded 7-factor composite for records
with lifetime metrics.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..core.config import ScoringConfig
from ..core.contracts import BuildingDims, DeveloperRecord
from ..core.prng import hash_str, seeded_random

logger = logging.getLogger(__name__)

WIDTH_SALT = 0
DEPTH_SALT = 99
JITTER_SPAN = 4.0

# Legacy weights: contributions, stars, repos
LEGACY_WEIGHTS = (0.55, 0.35, 0.10)

# Expanded weights: contributions, stars, PRs+reviews, external repos,
# consistency, followers, recent activity
EXPANDED_WEIGHTS = (0.30, 0.20, 0.15, 0.10, 0.10, 0.10, 0.05)

FOLLOWER_REFERENCE = 50_000


@dataclass(frozen=True)
class ScoreContext:
    """Aggregate maxima of a run; every value is floored at 1."""
    max_contributions: int = 1
    max_stars: int = 1
    max_contributions_total: int = 1

    @classmethod
    def from_records(cls, records: Iterable[DeveloperRecord]) -> 'ScoreContext':
        max_c, max_s, max_ct = 1, 1, 1
        for record in records:
            max_c = max(max_c, record.contributions)
            max_s = max(max_s, record.total_stars)
            max_ct = max(max_ct, record.contributions_total or 0)
        return cls(max_contributions=max_c, max_stars=max_s, max_contributions_total=max_ct)


def _jitter(login: str, salt: int) -> float:
    return (seeded_random(hash_str(login) + salt) - 0.5) * JITTER_SPAN


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _height_from_composite(composite: float, config: ScoringConfig) -> float:
    return min(config.max_height, config.min_height + composite * config.height_range)


def legacy_composite(contributions: int, total_stars: int, public_repos: int,
                     max_contrib: int, max_stars: int,
                     config: Optional[ScoringConfig] = None) -> float:
    """3-factor composite over contributions, stars and repo count."""
    config = config or ScoringConfig()
    eff_max_c = min(max_contrib, config.legacy_contribution_cap)
    eff_max_s = min(max_stars, config.star_cap)

    c_norm = contributions / max(1, eff_max_c)
    s_norm = total_stars / max(1, eff_max_s)
    r_norm = min(public_repos / 200, 1)

    c_score = min(c_norm, 3) ** 0.55
    s_score = min(s_norm, 3) ** 0.45
    r_score = r_norm ** 0.5

    w_c, w_s, w_r = LEGACY_WEIGHTS
    return c_score * w_c + s_score * w_s + r_score * w_r


def expanded_composite(record: DeveloperRecord, max_contributions_total: int, max_stars: int,
                       config: Optional[ScoringConfig] = None) -> float:
    """7-factor composite for records with lifetime metrics."""
    config = config or ScoringConfig()
    contribs = record.contributions_total if (record.contributions_total or 0) > 0 else record.contributions

    c_norm = contribs / max(1, min(max_contributions_total, config.expanded_contribution_cap))
    s_norm = record.total_stars / max(1, min(max_stars, config.star_cap))
    pr_norm = ((record.total_prs or 0) + (record.total_reviews or 0)) / 5_000
    ext_norm = (record.repos_contributed_to or 0) / 100
    f_norm = math.log10(max(1, record.followers or 0)) / math.log10(FOLLOWER_REFERENCE)
    activity_norm = min(1, (record.active_days_last_year or 0) / 300)

    account_age = max(1.0, record.account_age_years or 0.0)
    years_active = record.contribution_years or 1
    consistency_raw = (years_active / account_age) * min(1, contribs / (account_age * 200))
    consistency_norm = min(1, consistency_raw)

    scores = (
        min(c_norm, 3) ** 0.55,
        min(s_norm, 3) ** 0.45,
        min(pr_norm, 2) ** 0.5,
        min(ext_norm, 2) ** 0.5,
        consistency_norm ** 0.6,
        min(f_norm, 2) ** 0.5,
        activity_norm ** 0.5,
    )
    return sum(score * weight for score, weight in zip(scores, EXPANDED_WEIGHTS))


def calc_width(record: DeveloperRecord) -> int:
    """Width from repo count, language diversity and top-repo stars."""
    repo_norm = min(1, record.public_repos / 200)
    lang_norm = min(1, (record.language_diversity if record.language_diversity is not None else 1) / 10)
    top_star_norm = min(1, (record.top_repo_stars or 0) / 50_000)

    score = (
        repo_norm ** 0.5 * 0.50 +
        lang_norm ** 0.6 * 0.30 +
        top_star_norm ** 0.4 * 0.20
    )
    return _round_half_up(14 + score * 24 + _jitter(record.login, WIDTH_SALT))


def calc_depth(record: DeveloperRecord) -> int:
    """Depth from external contributions, orgs, PR volume and follower ratio."""
    ext_norm = min(1, (record.repos_contributed_to or 0) / 100)
    org_norm = min(1, (record.organizations_count or 0) / 10)
    pr_norm = min(1, (record.total_prs or 0) / 1_000)
    followers = record.followers or 0
    if followers > 0:
        following = record.following if record.following is not None else 1
        ratio_norm = min(1, (followers / max(1, following)) / 10)
    else:
        ratio_norm = 0

    score = (
        ext_norm ** 0.5 * 0.40 +
        org_norm ** 0.5 * 0.25 +
        pr_norm ** 0.5 * 0.20 +
        ratio_norm ** 0.5 * 0.15
    )
    return _round_half_up(12 + score * 20 + _jitter(record.login, DEPTH_SALT))


def calc_lit_fraction(record: DeveloperRecord, composite: float) -> float:
    """
    Share of lit windows.

    Expanded records blend recent activity, streak and year-over-year trend;
    legacy records fall back to a linear map of the composite.
    """
    if not record.has_expanded_metrics:
        return min(1.0, max(0.0, 0.2 + composite * 0.7))

    active_days_norm = min(1, (record.active_days_last_year or 0) / 300)
    streak_norm = min(1, (record.current_streak or 0) / 100)

    avg_per_year = record.contributions_total / max(1, record.contribution_years or 1)
    trend_raw = record.contributions / avg_per_year if avg_per_year > 0 else 1
    trend_norm = min(2, max(0, trend_raw)) / 2

    score = active_days_norm * 0.60 + streak_norm * 0.25 + trend_norm * 0.15
    return min(1.0, max(0.0, 0.05 + score * 0.90))


class ScoringEngine:
    """
    Scores records against the maxima of one run.

    Composite scores are memoized by login so partitioning and
    materialization see the same value.
    """

    def __init__(self, context: ScoreContext, config: Optional[ScoringConfig] = None):
        self.context = context
        self.config = config or ScoringConfig()
        self._composites = {}

    def composite(self, record: DeveloperRecord) -> float:
        cached = self._composites.get(record.login)
        if cached is not None:
            return cached

        if record.has_expanded_metrics:
            value = expanded_composite(record, self.context.max_contributions_total,
                                       self.context.max_stars, self.config)
        else:
            value = legacy_composite(record.contributions, record.total_stars, record.public_repos,
                                     self.context.max_contributions, self.context.max_stars, self.config)
        self._composites[record.login] = value
        return value

    def height(self, record: DeveloperRecord) -> float:
        return _height_from_composite(self.composite(record), self.config)

    def dimensions(self, record: DeveloperRecord) -> Tuple[BuildingDims, float]:
        """(dims, lit_fraction) for one record."""
        composite = self.composite(record)
        dims = BuildingDims(
            width=calc_width(record),
            height=_height_from_composite(composite, self.config),
            depth=calc_depth(record),
        )
        return dims, calc_lit_fraction(record, composite)

    @property
    def scored_count(self) -> int:
        return len(self._composites)


def calc_building_dims(login: str, contributions: int, public_repos: int, total_stars: int,
                       max_contrib: int, max_stars: int,
                       expanded: Optional[dict] = None,
                       config: Optional[ScoringConfig] = None) -> BuildingDims:
    """
    Dimensions for a single developer without a full layout run.

    Args:
        login: Developer login (seeds the width/depth jitter)
        contributions: Recent contribution count
        public_repos: Public repository count
        total_stars: Stars across owned repositories
        max_contrib: Reference maximum for contributions (lifetime maximum
            when ``expanded`` carries ``contributions_total``)
        max_stars: Reference maximum for stars
        expanded: Optional lifetime metrics keyed by DeveloperRecord field name
        config: Scoring configuration

    Returns:
        BuildingDims with the same values a layout run would produce
    """
    record = DeveloperRecord(
        login=login,
        contributions=contributions,
        public_repos=public_repos,
        total_stars=total_stars,
        **(expanded or {}),
    )
    context = ScoreContext(
        max_contributions=max(1, max_contrib),
        max_stars=max(1, max_stars),
        max_contributions_total=max(1, max_contrib),
    )
    dims, _ = ScoringEngine(context, config).dimensions(record)
    return dims
