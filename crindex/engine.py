"""Aggregation engine: group scores, the composite C→R index and derived indicators.

Every function here is pure; callers recompute on each read.

The derived indicators are illustrative heuristics with fixed constants:

- recovery reduction maps CER 0-100 linearly onto a 0-40% reduction in
  time-to-recover
- the stress index is a geometric mean of both groups, skewed towards
  adaptability (0.4 / 0.6)
- the pivot tier buckets adaptability at 75 and 55
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from crindex.models.catalog import MetricGroup
from crindex.models.scoring import AssessmentScores, ChartPoint, ChartSeries, PivotTier

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crindex.models.assessment import MetricValue, WeightPair

RECOVERY_REDUCTION_MAX = 40
STRESS_GEOMETRIC_WEIGHT = 0.4
STRESS_ADAPTABILITY_WEIGHT = 0.6
HIGH_TIER_THRESHOLD = 75
MODERATE_TIER_THRESHOLD = 55


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards +infinity."""
    return math.floor(value + 0.5)


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def group_score(values: Sequence[MetricValue], group: MetricGroup) -> float:
    """Arithmetic mean of the group's values, 0 for an empty group."""
    members = [v.value for v in values if v.group == group]
    if not members:
        return 0.0
    return sum(members) / len(members)


def normalized_weights(weights: WeightPair) -> tuple[float, float]:
    """Clamp both weights to [0, 1] and scale them to sum to 1.

    Two zero weights normalize to (0, 0) instead of dividing by zero.
    """
    cw = clamp01(weights.capacity_weight)
    aw = clamp01(weights.adaptability_weight)
    total = (cw + aw) or 1.0
    return cw / total, aw / total


def composite_score(capacity: float, adaptability: float, weights: WeightPair) -> float:
    """Weighted blend of the two group scores (CER), 0-100."""
    capacity_share, adaptability_share = normalized_weights(weights)
    cer = capacity_share * capacity + adaptability_share * adaptability
    return max(0.0, min(100.0, cer))


def recovery_reduction(cer: float) -> int:
    return round_half_up(cer / 100 * RECOVERY_REDUCTION_MAX)


def stress_index(capacity: float, adaptability: float) -> int:
    """Innovation-under-stress index.

    When either group scores 0 the geometric term vanishes and the index
    reduces to 60% of adaptability.
    """
    g = math.sqrt((capacity / 100) * (adaptability / 100))
    return round_half_up(
        100 * (STRESS_GEOMETRIC_WEIGHT * g + STRESS_ADAPTABILITY_WEIGHT * (adaptability / 100))
    )


def pivot_tier(adaptability: float) -> PivotTier:
    if adaptability >= HIGH_TIER_THRESHOLD:
        return PivotTier.HIGH
    if adaptability >= MODERATE_TIER_THRESHOLD:
        return PivotTier.MODERATE
    return PivotTier.DEVELOPING


def score_assessment(values: Sequence[MetricValue], weights: WeightPair) -> AssessmentScores:
    """Compute every derived value for one assessment."""
    capacity = group_score(values, MetricGroup.CAPACITY)
    adaptability = group_score(values, MetricGroup.ADAPTABILITY)
    capacity_share, adaptability_share = normalized_weights(weights)
    cer = composite_score(capacity, adaptability, weights)
    return AssessmentScores(
        capacity_score=capacity,
        adaptability_score=adaptability,
        capacity_share=capacity_share,
        adaptability_share=adaptability_share,
        composite=cer,
        recovery_reduction=recovery_reduction(cer),
        stress_index=stress_index(capacity, adaptability),
        pivot_tier=pivot_tier(adaptability),
    )


def chart_series(values: Sequence[MetricValue], scores: AssessmentScores) -> ChartSeries:
    """Radar points per metric (catalog order) and the rounded group/CER bars."""
    return ChartSeries(
        radar=[ChartPoint(name=v.label, score=v.value) for v in values],
        bars=[
            ChartPoint(name="Capacity", score=round_half_up(scores.capacity_score)),
            ChartPoint(name="Adaptability", score=round_half_up(scores.adaptability_score)),
            ChartPoint(name="C→R Index", score=round_half_up(scores.composite)),
        ],
    )
