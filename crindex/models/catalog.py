"""Metric catalog: the fixed set of definitions every assessment is scored against."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from crindex.errors import InvalidMetricIdError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class MetricGroup(StrEnum):
    CAPACITY = "capacity"
    ADAPTABILITY = "adaptability"


class MetricDefinition(BaseModel):
    """Immutable catalog entry. ``id`` is stable across sessions and share links."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    label: str
    help: str = ""
    group: MetricGroup
    default: int = Field(ge=0, le=100)


class Catalog:
    """Ordered, read-only collection of metric definitions.

    Order is significant for display and export, never for scoring.
    """

    def __init__(self, definitions: Iterable[MetricDefinition]) -> None:
        self._definitions: tuple[MetricDefinition, ...] = tuple(definitions)
        self._by_id: dict[str, MetricDefinition] = {}
        for definition in self._definitions:
            if definition.id in self._by_id:
                raise ValueError(f"Duplicate metric id in catalog: {definition.id!r}")
            self._by_id[definition.id] = definition

    def __iter__(self) -> Iterator[MetricDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, metric_id: object) -> bool:
        return metric_id in self._by_id

    def __repr__(self) -> str:
        return f"Catalog({list(self._by_id)!r})"

    @property
    def ids(self) -> list[str]:
        return list(self._by_id)

    def get(self, metric_id: str) -> MetricDefinition | None:
        return self._by_id.get(metric_id)

    def require(self, metric_id: str) -> MetricDefinition:
        """Return the definition for *metric_id* or raise InvalidMetricIdError."""
        definition = self._by_id.get(metric_id)
        if definition is None:
            raise InvalidMetricIdError(metric_id)
        return definition

    def by_group(self, group: MetricGroup) -> list[MetricDefinition]:
        return [d for d in self._definitions if d.group == group]


# ---------------------------------------------------------------------------
# Built-in catalog
# ---------------------------------------------------------------------------

DEFAULT_CATALOG = Catalog(
    [
        # Creative capacity (environmental enablers)
        MetricDefinition(
            id="autonomy",
            label="Autonomy",
            help="Teams can make decisions without constant approval gates.",
            group=MetricGroup.CAPACITY,
            default=60,
        ),
        MetricDefinition(
            id="psych_safety",
            label="Psychological Safety",
            help="It's safe to speak up, share half-formed ideas, and challenge assumptions.",
            group=MetricGroup.CAPACITY,
            default=55,
        ),
        MetricDefinition(
            id="experimentation",
            label="Experimentation Resources",
            help="Time, tools, and budget exist for small bets and prototypes.",
            group=MetricGroup.CAPACITY,
            default=50,
        ),
        MetricDefinition(
            id="idea_flow",
            label="Idea Flow",
            help="Ideas travel across functions; there are visible intake/triage paths.",
            group=MetricGroup.CAPACITY,
            default=52,
        ),
        MetricDefinition(
            id="leadership_support",
            label="Leadership Support",
            help="Leaders role\u2011model curiosity and protect time for exploration.",
            group=MetricGroup.CAPACITY,
            default=58,
        ),
        # Creative adaptability (under stress/change)
        MetricDefinition(
            id="reframing_speed",
            label="Reframing Speed",
            help="Ability to reframe a problem quickly when conditions shift.",
            group=MetricGroup.ADAPTABILITY,
            default=48,
        ),
        MetricDefinition(
            id="pivot_ability",
            label="Pivot Ability",
            help="Capacity to reconfigure plans, teams, or roadmaps at short notice.",
            group=MetricGroup.ADAPTABILITY,
            default=45,
        ),
        MetricDefinition(
            id="novel_options",
            label="Novel Options",
            help="Number/quality of nonobvious options generated under pressure.",
            group=MetricGroup.ADAPTABILITY,
            default=47,
        ),
        MetricDefinition(
            id="xfn_swarm",
            label="Cross\u2011Functional Swarm",
            help="Teams can swarm across boundaries to solve emergent issues.",
            group=MetricGroup.ADAPTABILITY,
            default=51,
        ),
        MetricDefinition(
            id="learning_loop",
            label="Learning Loop Speed",
            help="Time from signal → insight → action → updated playbook.",
            group=MetricGroup.ADAPTABILITY,
            default=49,
        ),
    ]
)
