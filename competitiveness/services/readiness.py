"""Readiness report: wires the numeric and qualitative evaluations together.

Flow:
    raw profile
      ├─ evaluate_competitiveness()   → EvaluationResult (total, level, details)
      │       ↓
      ├─ map_detail_to_stage() per detail → CategoryStage (+ display tokens)
      │
      ├─ derive_attributes()          → TierAttributes
      │       ↓
      └─ evaluate_qualitative()       → QualitativeResult
                       ↓
         ReadinessReport
"""

import logging
from datetime import date
from typing import Any

from competitiveness.models.profile import ProfileData
from competitiveness.models.results import CategoryStage, EvaluationDetail, ReadinessReport
from competitiveness.models.ruleset import CompetitivenessConfig, StageLevel, TierThresholds
from competitiveness.models.tiers import QualitativeResult, TierAttributes
from competitiveness.services.rule_evaluator import evaluate_competitiveness
from competitiveness.services.ruleset_loader import default_ruleset
from competitiveness.services.stage_mapper import map_detail_to_stage
from competitiveness.services.tier_aggregator import (
    compute_overall_tier,
    compute_overall_weighted_tier,
)
from competitiveness.services.tier_classifier import (
    category_status_summary,
    derive_attributes,
    evaluate_all_tiers,
)

logger = logging.getLogger(__name__)


def evaluate_qualitative(
    attributes: TierAttributes,
    config: CompetitivenessConfig | None = None,
    thresholds: TierThresholds | None = None,
) -> QualitativeResult:
    """Classify every qualitative category and roll the tiers up both ways."""
    config = config or default_ruleset()
    thresholds = thresholds or config.qualitative.thresholds
    tiers = evaluate_all_tiers(attributes, thresholds)
    return QualitativeResult(
        tiers=tiers,
        summaries={cat: category_status_summary(cat, attributes, thresholds) for cat in tiers},
        overall=compute_overall_tier(tiers),
        weighted=compute_overall_weighted_tier(tiers, config.qualitative.weights),
    )


def _category_stage(detail: EvaluationDetail, config: CompetitivenessConfig) -> CategoryStage:
    stage = map_detail_to_stage(detail, config)
    category = config.categories.get(detail.category)
    hints = category.summary_hints if category else None

    hint = ""
    if hints is not None:
        if not detail.matched_rules:
            hint = hints.empty
        elif stage != StageLevel.COMPETITIVE.value:
            hint = hints.improve

    return CategoryStage(
        category=detail.category,
        display_name=category.display_name if category else detail.category.value,
        stage=stage,
        label=config.display.level_labels.get(stage, stage),
        tone=config.display.level_tones.get(stage, ""),
        hint=hint,
    )


def evaluate_profile(
    raw: ProfileData | dict[str, Any] | None,
    config: CompetitivenessConfig | None = None,
    now: date | None = None,
    attributes: TierAttributes | None = None,
) -> ReadinessReport:
    """Run both evaluations over one profile.

    ``attributes`` replaces the derived qualitative attributes when the
    caller has richer (e.g. verified) data.
    """
    config = config or default_ruleset()
    now = now or date.today()
    profile = ProfileData.from_raw(raw)

    evaluation = evaluate_competitiveness(profile, config, now)
    stages = [_category_stage(d, config) for d in evaluation.details]
    qualitative = evaluate_qualitative(attributes or derive_attributes(profile, now), config)

    logger.debug(
        "Readiness: total=%g level=%s overall_tier=%s",
        evaluation.total, evaluation.level, qualitative.overall.value,
    )
    return ReadinessReport(
        evaluation=evaluation,
        stages=stages,
        qualitative=qualitative,
        level_label=config.display.level_labels.get(evaluation.level, evaluation.level),
        level_tone=config.display.level_tones.get(evaluation.level, ""),
    )
