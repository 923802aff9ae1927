"""Re-exports all Pydantic models."""

from crindex.models.assessment import (
    SNAPSHOT_VERSION,
    AssessmentContext,
    AssessmentSnapshot,
    MetricValue,
    SnapshotItem,
    WeightPair,
    clamp_value,
)
from crindex.models.catalog import DEFAULT_CATALOG, Catalog, MetricDefinition, MetricGroup
from crindex.models.scoring import AssessmentScores, ChartPoint, ChartSeries, PivotTier

__all__ = [
    "DEFAULT_CATALOG",
    "SNAPSHOT_VERSION",
    "AssessmentContext",
    "AssessmentScores",
    "AssessmentSnapshot",
    "Catalog",
    "ChartPoint",
    "ChartSeries",
    "MetricDefinition",
    "MetricGroup",
    "MetricValue",
    "PivotTier",
    "SnapshotItem",
    "WeightPair",
    "clamp_value",
]
