"""Roll per-category qualitative tiers up into an overall tier."""

import logging
import math
from collections import Counter
from typing import Mapping

from competitiveness.models.tiers import QualitativeCategory, Tier, WeightedTier

logger = logging.getLogger(__name__)

TIER_SCORES: dict[Tier, float] = {
    Tier.EXCEPTIONAL: 1.0,
    Tier.COMPETITIVE: 0.75,
    Tier.DEVELOPING: 0.4,
    Tier.NEEDS_IMPROVEMENT: 0.2,
    Tier.UNKNOWN: 0.0,
}

DEFAULT_WEIGHTS: dict[QualitativeCategory, float] = {
    QualitativeCategory.EDUCATION: 0.25,
    QualitativeCategory.WORK: 0.30,
    QualitativeCategory.VOLUNTEER: 0.20,
    QualitativeCategory.CERTS_SKILLS: 0.15,
    QualitativeCategory.REFERENCES: 0.10,
}

# (minimum normalized score, tier), highest first
WEIGHTED_CUTOFFS: tuple[tuple[float, Tier], ...] = (
    (0.85, Tier.EXCEPTIONAL),
    (0.65, Tier.COMPETITIVE),
    (0.40, Tier.DEVELOPING),
)

MAJORITY = 3


def _key_name(key: QualitativeCategory | str) -> str:
    return key.value if isinstance(key, QualitativeCategory) else str(key)


def compute_overall_tier(tiers: Mapping[QualitativeCategory, Tier]) -> Tier:
    """Majority vote across categories.

    Unknown categories are ignored. Three or more strong tiers (with at least
    two Exceptional and no weak ones) give Exceptional; three or more weak
    tiers pull the profile down.
    """
    counts = Counter(t for t in tiers.values() if t != Tier.UNKNOWN)
    if not counts:
        return Tier.UNKNOWN

    high = counts[Tier.EXCEPTIONAL] + counts[Tier.COMPETITIVE]
    low = counts[Tier.DEVELOPING] + counts[Tier.NEEDS_IMPROVEMENT]

    if high >= MAJORITY:
        if counts[Tier.EXCEPTIONAL] >= 2 and low == 0:
            return Tier.EXCEPTIONAL
        return Tier.COMPETITIVE
    if low >= MAJORITY:
        if counts[Tier.NEEDS_IMPROVEMENT] >= 2:
            return Tier.NEEDS_IMPROVEMENT
        return Tier.DEVELOPING
    return Tier.COMPETITIVE if high >= low else Tier.DEVELOPING


def compute_overall_weighted_tier(
    tiers: Mapping[QualitativeCategory, Tier],
    weights: Mapping[QualitativeCategory | str, float] | None = None,
) -> WeightedTier:
    """Weighted mean of tier scores over every weighted category.

    A weighted category missing from ``tiers`` counts as Unknown (score 0) and
    keeps its weight in the denominator. Categories without a weight do not
    contribute. Keys in either mapping may be enum members or their values.
    """
    weights = DEFAULT_WEIGHTS if weights is None else weights
    by_name = {_key_name(k): t for k, t in tiers.items()}
    total = 0.0
    weight_sum = 0.0
    for key, weight in weights.items():
        if weight <= 0:
            continue
        tier = by_name.get(_key_name(key), Tier.UNKNOWN)
        total += TIER_SCORES[tier] * weight
        weight_sum += weight

    normalized = round(total / weight_sum, 6) if weight_sum else 0.0
    tier = next((t for cutoff, t in WEIGHTED_CUTOFFS if normalized >= cutoff), Tier.NEEDS_IMPROVEMENT)
    score = math.floor(normalized * 100 + 0.5)
    logger.debug("Weighted tier %s (normalized=%.3f)", tier.value, normalized)
    return WeightedTier(tier=tier, score=score)
