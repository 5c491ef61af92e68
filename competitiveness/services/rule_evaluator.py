"""Numeric competitiveness evaluation.

Flow:
    raw profile ── ProfileData.from_raw ──> ProfileData
        ├─ compute_resume_metrics()       → ResumeMetrics
        ├─ evaluate_category() per key    → EvaluationDetail (capped at weight)
        ├─ find_disqualifiers()           → level override / category actions
        └─ map_score_to_level()           → EvaluationResult
"""

import logging
from datetime import date
from typing import Any

from competitiveness.models.profile import ProfileData
from competitiveness.models.results import EvaluationDetail, EvaluationResult
from competitiveness.models.ruleset import (
    CategoryKey,
    CompetitivenessConfig,
    Disqualifier,
    Rule,
)
from competitiveness.services.resume_metrics import compute_resume_metrics
from competitiveness.services.rule_predicates import (
    DISQUALIFIER_PREDICATES,
    RuleContext,
    rule_units,
)
from competitiveness.services.ruleset_loader import default_ruleset
from competitiveness.services.stage_mapper import map_score_to_level

logger = logging.getLogger(__name__)

ACTION_ZERO_DRIVING = "set_driving_zero_and_flag"


def rule_points(rule: Rule, units: int) -> float:
    """Points a rule contributes for the given predicate units.

    Repeatable rules pay per unit and are clamped to their own cap before
    they reach the category total.
    """
    if units <= 0:
        return 0.0
    if not rule.repeatable:
        return rule.points
    points = units * rule.points
    if rule.cap is not None:
        points = min(points, rule.cap)
    return points


def evaluate_category(
    category: CategoryKey, ctx: RuleContext, config: CompetitivenessConfig
) -> EvaluationDetail:
    raw = 0.0
    matched: list[str] = []
    for rule in config.rules(category):
        points = rule_points(rule, rule_units(category, rule.id, ctx))
        if points > 0:
            raw += points
            matched.append(f"{rule.id}:{points:g}")

    category_max = config.weight(category)
    capped = min(raw, category_max)
    logger.debug(
        "%s: raw=%g capped=%g/%g matched=%s", category.value, raw, capped, category_max, matched
    )
    return EvaluationDetail(
        category=category,
        raw_points=raw,
        capped_points=capped,
        category_max=category_max,
        matched_rules=matched,
    )


def find_disqualifiers(profile: ProfileData, config: CompetitivenessConfig) -> list[Disqualifier]:
    """Configured disqualifiers whose condition holds, in config order."""
    hits = []
    for disq in config.disqualifiers:
        check = DISQUALIFIER_PREDICATES.get(disq.id)
        if check is None:
            logger.debug("No predicate for disqualifier %s", disq.id)
            continue
        if check(profile):
            hits.append(disq)
    return hits


def _apply_action(details: list[EvaluationDetail], action: str) -> list[EvaluationDetail]:
    if action != ACTION_ZERO_DRIVING:
        logger.warning("Unsupported disqualifier action: %s", action)
        return details
    return [
        d.model_copy(update={"capped_points": 0.0, "matched_rules": []})
        if d.category == CategoryKey.DRIVING
        else d
        for d in details
    ]


def evaluate_competitiveness(
    profile: ProfileData | dict[str, Any] | None,
    config: CompetitivenessConfig | None = None,
    now: date | None = None,
) -> EvaluationResult:
    """Score a profile against a ruleset.

    Missing or malformed data contributes nothing; a matched level
    disqualifier forces the level regardless of the total.
    """
    config = config or default_ruleset()
    now = now or date.today()
    profile = ProfileData.from_raw(profile)

    ctx = RuleContext(profile=profile, metrics=compute_resume_metrics(profile, now), now=now)
    details = [evaluate_category(key, ctx, config) for key in config.ordered_categories()]

    level_override: str | None = None
    disqualifier_id: str | None = None
    flags: list[str] = []
    for disq in find_disqualifiers(profile, config):
        if disq.effect.level is not None:
            if level_override is None:
                level_override = disq.effect.level
                disqualifier_id = disq.id
        else:
            details = _apply_action(details, disq.effect.action)
            flags.append(disq.id)

    total = sum(d.capped_points for d in details)
    level = level_override or map_score_to_level(total, config)
    if level_override:
        logger.debug("Profile disqualified by %s (total would be %g)", disqualifier_id, total)

    return EvaluationResult(
        total=total,
        level=level,
        details=details,
        disqualified=level_override is not None,
        disqualifier_id=disqualifier_id,
        flags=flags,
    )
