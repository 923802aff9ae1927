"""CSV export: one row per catalog metric, repeating the session-level aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crindex.engine import score_assessment

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crindex.models.assessment import AssessmentContext, MetricValue, WeightPair
    from crindex.models.scoring import AssessmentScores

CSV_HEADERS: tuple[str, ...] = (
    "group",
    "id",
    "label",
    "value",
    "capacityWeight",
    "adaptabilityWeight",
    "capacityScore",
    "adaptabilityScore",
    "CER",
    "estimatedRecoveryReduction",
    "innovationUnderStressIndex",
    "pivotTier",
    "teamName",
    "department",
    "assessmentDate",
    "assessorName",
    "assessmentPurpose",
)


def quote(text: str) -> str:
    """Wrap a text field in double quotes, doubling any embedded quotes."""
    return '"' + text.replace('"', '""') + '"'


def export_rows(
    values: Sequence[MetricValue],
    weights: WeightPair,
    context: AssessmentContext,
    scores: AssessmentScores | None = None,
) -> list[list[str]]:
    """Formatted CSV cells, header excluded."""
    if scores is None:
        scores = score_assessment(values, weights)
    session_cells = [
        f"{weights.capacity_weight:.2f}",
        f"{weights.adaptability_weight:.2f}",
        f"{scores.capacity_score:.1f}",
        f"{scores.adaptability_score:.1f}",
        f"{scores.composite:.1f}",
        str(scores.recovery_reduction),
        str(scores.stress_index),
        quote(scores.pivot_tier.label),
        quote(context.team_name),
        quote(context.department),
        quote(context.assessment_date),
        quote(context.assessor_name),
        quote(context.assessment_purpose),
    ]
    return [
        [v.group.value, v.id, quote(v.label), str(v.value), *session_cells] for v in values
    ]


def export_csv(
    values: Sequence[MetricValue],
    weights: WeightPair,
    context: AssessmentContext,
) -> str:
    lines = [",".join(CSV_HEADERS)]
    lines.extend(",".join(row) for row in export_rows(values, weights, context))
    return "\n".join(lines)
