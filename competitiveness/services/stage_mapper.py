"""Map totals and per-category percentages onto level and stage labels."""

import logging
from typing import Sequence

from competitiveness.models.results import EvaluationDetail
from competitiveness.models.ruleset import (
    NOT_ELIGIBLE,
    STAGE_ORDER,
    CategoryKey,
    CompetitivenessConfig,
    LevelThreshold,
)

logger = logging.getLogger(__name__)


def stage_ordinal(level: str) -> int:
    """Position in NEEDS_WORK < DEVELOPING < EFFECTIVE < COMPETITIVE; -1 if unknown."""
    try:
        return STAGE_ORDER.index(level)
    except ValueError:
        return -1


def pick_threshold(value: float, thresholds: Sequence[LevelThreshold]) -> str:
    """First threshold (highest ``min`` first) whose minimum ``value`` reaches.

    Falls back to the lowest threshold when nothing matches.
    """
    ordered = sorted(thresholds, key=lambda t: t.min, reverse=True)
    for threshold in ordered:
        if value >= threshold.min:
            return threshold.level
    return ordered[-1].level


def map_score_to_level(
    total: float, config: CompetitivenessConfig, not_eligible: bool = False
) -> str:
    if not_eligible:
        return NOT_ELIGIBLE
    return pick_threshold(total, config.thresholds)


def map_score_to_category_level(
    category: CategoryKey, percent: float, config: CompetitivenessConfig
) -> str:
    return pick_threshold(percent, config.stages_for(category))


def map_detail_to_stage(
    detail: EvaluationDetail,
    config: CompetitivenessConfig,
    stages: Sequence[LevelThreshold] | None = None,
) -> str:
    """Stage for one category: percentage-based, then raised by anchor lifts.

    A lift can only raise the stage; the result's ordinal is never below the
    percentage-only stage.
    """
    base = pick_threshold(detail.percent, stages or config.stages_for(detail.category))
    matched = detail.matched_rule_ids

    stage = base
    for lift in config.anchor_lifts.get(detail.category, ()):
        if lift.applies(matched) and stage_ordinal(lift.target.value) > stage_ordinal(stage):
            stage = lift.target.value
    if stage != base:
        logger.debug("%s stage lifted %s -> %s", detail.category.value, base, stage)
    return stage


def map_stages(
    details: Sequence[EvaluationDetail], config: CompetitivenessConfig
) -> dict[CategoryKey, str]:
    return {d.category: map_detail_to_stage(d, config) for d in details}
