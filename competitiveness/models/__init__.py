"""Pydantic contracts shared by the evaluation services."""

from competitiveness.models.metrics import (
    EducationMetrics,
    ResumeMetrics,
    VolunteerMetrics,
    WorkMetrics,
)
from competitiveness.models.profile import ProfileData
from competitiveness.models.results import (
    CategoryStage,
    EvaluationDetail,
    EvaluationResult,
    ReadinessReport,
)
from competitiveness.models.ruleset import (
    CategoryKey,
    CompetitivenessConfig,
    StageLevel,
)
from competitiveness.models.tiers import (
    QualitativeCategory,
    QualitativeResult,
    Tier,
    TierAttributes,
)

__all__ = [
    "CategoryKey",
    "CategoryStage",
    "CompetitivenessConfig",
    "EducationMetrics",
    "EvaluationDetail",
    "EvaluationResult",
    "ProfileData",
    "ReadinessReport",
    "QualitativeCategory",
    "QualitativeResult",
    "ResumeMetrics",
    "StageLevel",
    "Tier",
    "TierAttributes",
    "VolunteerMetrics",
    "WorkMetrics",
]
