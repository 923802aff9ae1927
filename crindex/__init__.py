"""crindex: Creativity → Resilience (C→R) index scoring, state and sharing."""

from crindex.engine import score_assessment
from crindex.models import DEFAULT_CATALOG, AssessmentScores, AssessmentSnapshot
from crindex.store import AssessmentStore

__all__ = [
    "DEFAULT_CATALOG",
    "AssessmentScores",
    "AssessmentSnapshot",
    "AssessmentStore",
    "score_assessment",
]

__version__ = "0.1.0"
