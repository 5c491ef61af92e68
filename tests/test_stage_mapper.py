"""Tests for level and stage mapping, including anchor lifts."""

import pytest

from competitiveness.models.results import EvaluationDetail
from competitiveness.models.ruleset import CategoryKey, LevelThreshold, StageLevel
from competitiveness.services.stage_mapper import (
    map_detail_to_stage,
    map_score_to_category_level,
    map_score_to_level,
    pick_threshold,
    stage_ordinal,
)


def _make_detail(category=CategoryKey.WORK, capped=0.0, maximum=20.0, matched=()) -> EvaluationDetail:
    return EvaluationDetail(
        category=category,
        raw_points=capped,
        capped_points=capped,
        category_max=maximum,
        matched_rules=list(matched),
    )


class TestPickThreshold:
    def setup_method(self):
        # Deliberately unsorted
        self.thresholds = [
            LevelThreshold(level="LOW", min=0),
            LevelThreshold(level="HIGH", min=80),
            LevelThreshold(level="MID", min=50),
        ]

    def test_boundaries(self):
        assert pick_threshold(80, self.thresholds) == "HIGH"
        assert pick_threshold(79.9, self.thresholds) == "MID"
        assert pick_threshold(0, self.thresholds) == "LOW"

    def test_below_every_minimum_falls_back_to_lowest(self):
        thresholds = [LevelThreshold(level="A", min=10), LevelThreshold(level="B", min=5)]
        assert pick_threshold(1, thresholds) == "B"


class TestMapScoreToLevel:
    @pytest.mark.parametrize("total,level", [(100, "COMPETITIVE"), (75, "COMPETITIVE"), (60, "EFFECTIVE"), (35, "DEVELOPING"), (10, "NEEDS_WORK")])
    def test_default_thresholds(self, ruleset, total, level):
        assert map_score_to_level(total, ruleset) == level

    def test_not_eligible(self, ruleset):
        assert map_score_to_level(100, ruleset, not_eligible=True) == "Not Eligible"

    def test_category_level(self, ruleset):
        assert map_score_to_category_level(CategoryKey.CERTS, 60, ruleset) == "EFFECTIVE"

    def test_category_without_table_uses_global(self, ruleset):
        assert CategoryKey.FITNESS not in ruleset.category_stages
        assert map_score_to_category_level(CategoryKey.FITNESS, 80, ruleset) == "COMPETITIVE"


class TestMapDetailToStage:
    def test_percentage_only(self, ruleset):
        assert map_detail_to_stage(_make_detail(capped=8), ruleset) == "DEVELOPING"

    def test_anchor_lifts_stage(self, ruleset):
        detail = _make_detail(capped=8, matched=["ft_1to2y:8"])
        assert map_detail_to_stage(detail, ruleset) == "EFFECTIVE"

    def test_strongest_lift_wins(self, ruleset):
        detail = _make_detail(capped=20, matched=["relevant_3y_plus:20", "ft_2y_plus:10"])
        assert map_detail_to_stage(detail, ruleset) == "COMPETITIVE"

    def test_lift_never_lowers(self, ruleset):
        detail = _make_detail(capped=18, matched=["ft_2y_plus:10", "nonrel_leadership_3y_plus:12"])
        assert map_detail_to_stage(detail, ruleset) == "COMPETITIVE"

    def test_all_of_requires_every_rule(self, ruleset):
        one = _make_detail(CategoryKey.SOFTSKILLS, capped=2, maximum=5, matched=["second_language_proficient:2"])
        both = _make_detail(
            CategoryKey.SOFTSKILLS, capped=2, maximum=5,
            matched=["second_language_proficient:2", "skills_two_plus:1"],
        )
        assert map_detail_to_stage(one, ruleset) == "DEVELOPING"
        assert map_detail_to_stage(both, ruleset) == "EFFECTIVE"

    def test_zero_weight_category(self, ruleset):
        detail = _make_detail(capped=0, maximum=0)
        assert map_detail_to_stage(detail, ruleset) == "NEEDS_WORK"

    @pytest.mark.parametrize("capped", [0, 4, 7, 11, 15, 20])
    @pytest.mark.parametrize("matched", [[], ["relevant_1to2y:14"], ["relevant_3y_plus:20"]])
    def test_never_below_percentage_stage(self, ruleset, capped, matched):
        detail = _make_detail(capped=capped, matched=matched)
        base = pick_threshold(detail.percent, ruleset.stages_for(CategoryKey.WORK))
        assert stage_ordinal(map_detail_to_stage(detail, ruleset)) >= stage_ordinal(base)


class TestStageOrdinal:
    def test_order(self):
        ordinals = [stage_ordinal(s.value) for s in StageLevel]
        assert ordinals == [0, 1, 2, 3]

    def test_unknown(self):
        assert stage_ordinal("Not Eligible") == -1
