"""Models for aggregation results."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class PivotTier(StrEnum):
    HIGH = "high"
    MODERATE = "moderate"
    DEVELOPING = "developing"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS: dict[PivotTier, str] = {
    PivotTier.HIGH: "Tier 1 (high)",
    PivotTier.MODERATE: "Tier 2 (moderate)",
    PivotTier.DEVELOPING: "Tier 3 (developing)",
}


class AssessmentScores(BaseModel):
    """Everything derived from one metric sequence and weight pair."""

    model_config = ConfigDict(frozen=True)

    capacity_score: float = Field(ge=0.0, le=100.0)
    adaptability_score: float = Field(ge=0.0, le=100.0)
    capacity_share: float = Field(ge=0.0, le=1.0, description="Normalized capacity weight")
    adaptability_share: float = Field(ge=0.0, le=1.0, description="Normalized adaptability weight")
    composite: float = Field(ge=0.0, le=100.0, description="C→R index (CER)")
    recovery_reduction: int = Field(ge=0, le=40, description="Estimated % cut in time-to-recover")
    stress_index: int = Field(ge=0, le=100, description="Innovation-under-stress index")
    pivot_tier: PivotTier


class ChartPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    score: int


class ChartSeries(BaseModel):
    """Data behind the radar (per metric) and bar (per group + CER) charts."""

    model_config = ConfigDict(frozen=True)

    radar: list[ChartPoint] = Field(default_factory=list)
    bars: list[ChartPoint] = Field(default_factory=list)
