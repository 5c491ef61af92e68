"""Tests for YAML ruleset loading and validation."""

import logging

import pytest

from competitiveness.models.ruleset import CategoryKey
from competitiveness.services.ruleset_loader import (
    RulesetError,
    default_ruleset,
    load_ruleset,
    parse_ruleset,
    unknown_rule_ids,
)

MINIMAL_YAML = """
version: test-1
categories:
  references:
    weight: 100
    rules:
      - {id: three_refs_mock_done, points: 100}
thresholds:
  - {level: LOW, min: 0}
  - {level: HIGH, min: 50}
"""


def _make_data(**overrides) -> dict:
    data = {
        "categories": {"fitness": {"weight": 100, "rules": [{"id": "prep_pass_6m", "points": 100}]}},
        "thresholds": [{"level": "LOW", "min": 0}],
    }
    data.update(overrides)
    return data


class TestDefaultRuleset:
    def test_weights_sum_to_100(self, ruleset):
        assert ruleset.total_weight == 100

    def test_all_categories_present(self, ruleset):
        assert set(ruleset.categories) == set(CategoryKey)

    def test_thresholds_descending(self, ruleset):
        mins = [t.min for t in ruleset.thresholds]
        assert mins == sorted(mins, reverse=True)
        assert ruleset.lowest_level == "NEEDS_WORK"

    def test_no_unknown_rules(self, ruleset):
        assert unknown_rule_ids(ruleset) == []

    def test_yaml_anchor_stages_shared(self, ruleset):
        assert ruleset.stages_for(CategoryKey.WORK) == ruleset.stages_for(CategoryKey.EDUCATION)

    def test_driving_disqualifier_is_an_action(self, ruleset):
        disq = {d.id: d for d in ruleset.disqualifiers}
        assert disq["recent_major_driving_offense"].effect.action == "set_driving_zero_and_flag"
        assert disq["criminal_open_or_recent_conviction"].effect.level == "Not Eligible"

    def test_qualitative_section(self, ruleset):
        assert ruleset.qualitative.thresholds.volunteer_hours_lifetime_min == 150
        assert sum(ruleset.qualitative.weights.values()) == pytest.approx(1.0)

    def test_bonus_rules_tagged(self, ruleset):
        education = {r.id: r for r in ruleset.categories[CategoryKey.EDUCATION].rules}
        assert education["recent_grad_bonus"].cap_category is True

    def test_default_ruleset_is_memoised(self):
        assert default_ruleset() is default_ruleset()

    def test_config_is_frozen(self, ruleset):
        with pytest.raises(Exception):
            ruleset.version = "changed"


class TestLoadRuleset:
    def test_load_from_path(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(MINIMAL_YAML, encoding="utf-8")
        config = load_ruleset(path)
        assert config.version == "test-1"
        assert [t.level for t in config.thresholds] == ["HIGH", "LOW"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(RulesetError, match="cannot read"):
            load_ruleset(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("categories: [unclosed", encoding="utf-8")
        with pytest.raises(RulesetError, match="malformed YAML"):
            load_ruleset(path)


class TestParseRuleset:
    def test_not_a_mapping(self):
        with pytest.raises(RulesetError):
            parse_ruleset(["a", "b"])

    def test_negative_weight(self):
        data = _make_data(categories={"fitness": {"weight": -5, "rules": []}})
        with pytest.raises(RulesetError):
            parse_ruleset(data)

    def test_duplicate_rule_ids(self):
        rules = [{"id": "prep_pass_6m", "points": 1}, {"id": "prep_pass_6m", "points": 2}]
        with pytest.raises(RulesetError, match="duplicate"):
            parse_ruleset(_make_data(categories={"fitness": {"weight": 100, "rules": rules}}))

    def test_empty_thresholds(self):
        with pytest.raises(RulesetError):
            parse_ruleset(_make_data(thresholds=[]))

    def test_unknown_category_key(self):
        with pytest.raises(RulesetError):
            parse_ruleset(_make_data(categories={"karate": {"weight": 100, "rules": []}}))

    def test_disqualifier_needs_one_effect(self):
        disqualifiers = [{"id": "dishonesty", "effect": {"level": "Not Eligible", "action": "x"}}]
        with pytest.raises(RulesetError):
            parse_ruleset(_make_data(disqualifiers=disqualifiers))

    def test_weight_sum_warning(self, caplog):
        data = _make_data(categories={"fitness": {"weight": 40, "rules": []}})
        with caplog.at_level(logging.WARNING):
            config = parse_ruleset(data)
        assert config.total_weight == 40
        assert "weights sum to 40" in caplog.text

    def test_unknown_rule_warns(self, caplog):
        data = _make_data(categories={"fitness": {"weight": 100, "rules": [{"id": "bench_press", "points": 5}]}})
        with caplog.at_level(logging.WARNING):
            parse_ruleset(data, strict=False)
        assert "fitness/bench_press" in caplog.text

    def test_unknown_rule_strict(self):
        data = _make_data(categories={"fitness": {"weight": 100, "rules": [{"id": "bench_press", "points": 5}]}})
        with pytest.raises(RulesetError, match="bench_press"):
            parse_ruleset(data, strict=True)

    def test_unknown_disqualifier_warns(self, caplog):
        data = _make_data(disqualifiers=[{"id": "late_payment", "effect": {"level": "Not Eligible"}}])
        with caplog.at_level(logging.WARNING):
            parse_ruleset(data)
        assert "late_payment" in caplog.text

    def test_alternate_config_is_independent(self, ruleset):
        other = parse_ruleset(_make_data(version="other-jurisdiction"))
        assert other.version == "other-jurisdiction"
        assert ruleset.version == "2025-08-20"
