"""Assessment state: metric values, weights, context and the shareable snapshot."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from crindex.models.catalog import MetricDefinition, MetricGroup

SNAPSHOT_VERSION = 1

VALUE_MIN = 0
VALUE_MAX = 100


def clamp_value(value: int) -> int:
    """Clamp a raw metric value into the 0-100 range."""
    return max(VALUE_MIN, min(VALUE_MAX, int(value)))


class MetricValue(BaseModel):
    """Current value of one catalog metric."""

    model_config = ConfigDict(frozen=True)

    definition: MetricDefinition
    value: int = Field(ge=VALUE_MIN, le=VALUE_MAX)

    @classmethod
    def clamped(cls, definition: MetricDefinition, value: int) -> MetricValue:
        return cls(definition=definition, value=clamp_value(value))

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def group(self) -> MetricGroup:
        return self.definition.group

    @property
    def label(self) -> str:
        return self.definition.label


class WeightPair(BaseModel):
    """Relative importance of the two groups.

    Stored as entered; clamping and normalization happen when scoring.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    capacity_weight: float = Field(default=0.5, allow_inf_nan=False)
    adaptability_weight: float = Field(default=0.5, allow_inf_nan=False)

    def for_group(self, group: MetricGroup) -> float:
        if group == MetricGroup.CAPACITY:
            return self.capacity_weight
        return self.adaptability_weight

    def with_group(self, group: MetricGroup, value: float) -> WeightPair:
        field = "capacity_weight" if group == MetricGroup.CAPACITY else "adaptability_weight"
        return WeightPair.model_validate({**self.model_dump(), field: value})


class AssessmentContext(BaseModel):
    """Free-text metadata carried alongside an assessment."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    team_name: str = ""
    department: str = ""
    assessment_date: str = Field(default="", description="ISO date, e.g. 2026-03-01")
    assessor_name: str = ""
    assessment_purpose: str = ""

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class SnapshotItem(BaseModel):
    """Wire form of a single metric value."""

    model_config = ConfigDict(frozen=True)

    id: str
    value: int


class AssessmentSnapshot(BaseModel):
    """Unit of persistence and sharing.

    Snapshots may be partial: items can omit catalog metrics or name
    metrics the catalog no longer has, and weights/context may be absent.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: Literal[1] = Field(default=SNAPSHOT_VERSION, alias="v")
    items: list[SnapshotItem] = Field(default_factory=list)
    weights: WeightPair | None = None
    context: AssessmentContext | None = None

    def values_by_id(self) -> dict[str, int]:
        """Map metric id to raw value. Later duplicates win."""
        return {item.id: item.value for item in self.items}
