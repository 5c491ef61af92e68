"""Tests for the qualitative anchor-plus-supporting tier classifier."""

import pytest

from competitiveness.models.profile import EducationEntry, ProfileData
from competitiveness.models.ruleset import TierThresholds
from competitiveness.models.tiers import (
    CertAttributes,
    ConductAttributes,
    DriverAttributes,
    EducationAttributes,
    QualitativeCategory,
    ReferenceAttributes,
    SkillAttributes,
    Tier,
    TierAttributes,
    TierSignals,
    VolunteerAttributes,
    WorkAttributes,
)
from competitiveness.services.tier_classifier import (
    category_signals,
    category_status_summary,
    classify_tier,
    derive_attributes,
    evaluate_all_tiers,
    evaluate_category_tier,
    highest_education_level,
    normalize_education_level,
)

Q = QualitativeCategory


class TestClassifyTier:
    @pytest.mark.parametrize("signals,tier", [
        (TierSignals(), Tier.UNKNOWN),
        (TierSignals(anchor_met=True, supporting_met=2, info_present=True), Tier.EXCEPTIONAL),
        (TierSignals(anchor_met=True, supporting_met=1, info_present=True), Tier.COMPETITIVE),
        (TierSignals(anchor_met=False, supporting_met=2, info_present=True), Tier.DEVELOPING),
        (TierSignals(anchor_met=False, supporting_met=1, info_present=True), Tier.NEEDS_IMPROVEMENT),
        (TierSignals(info_present=True), Tier.NEEDS_IMPROVEMENT),
    ])
    def test_rule_table(self, signals, tier):
        assert classify_tier(signals) == tier

    def test_anchor_alone_counts_as_information(self):
        assert classify_tier(TierSignals(anchor_met=True)) == Tier.COMPETITIVE


class TestEducationLevel:
    @pytest.mark.parametrize("text,expected", [
        ("Masters", (4, "Postgrad")),
        ("PhD", (4, "Postgrad")),
        ("University Degree", (3, "University Degree")),
        ("Bachelor of Arts", (3, "University Degree")),
        ("College", (2, "College Diploma")),
        ("Diploma", (2, "College Diploma")),
        ("High School Diploma", (1, "High School")),
        ("HS", (1, "High School")),
        ("Trade Certificate", (0, "Trade Certificate")),
    ])
    def test_normalize(self, text, expected):
        assert normalize_education_level(text) == expected

    def test_highest_across_entries(self):
        entries = [EducationEntry(level="High School"), EducationEntry(level="College Diploma")]
        assert highest_education_level(entries) == "College Diploma"

    def test_empty(self):
        assert highest_education_level([]) == ""


class TestCategorySignals:
    def test_work_anchor_by_fulltime_years(self):
        attrs = TierAttributes(work=WorkAttributes(fulltime_years=2, public_facing=True, leadership=True))
        assert evaluate_category_tier(Q.WORK, attrs) == Tier.EXCEPTIONAL

    def test_work_anchor_by_relevant_months(self):
        attrs = TierAttributes(work=WorkAttributes(relevant_months=12))
        assert evaluate_category_tier(Q.WORK, attrs) == Tier.COMPETITIVE

    def test_work_history_without_figures_is_information(self):
        attrs = TierAttributes(has_work_history=True)
        assert evaluate_category_tier(Q.WORK, attrs) == Tier.NEEDS_IMPROVEMENT

    def test_custom_thresholds(self):
        attrs = TierAttributes(work=WorkAttributes(fulltime_years=1.5))
        assert evaluate_category_tier(Q.WORK, attrs) == Tier.NEEDS_IMPROVEMENT
        relaxed = TierThresholds(work_fulltime_years_min=1)
        assert evaluate_category_tier(Q.WORK, attrs, relaxed) == Tier.COMPETITIVE

    def test_volunteer_supporting_only(self):
        attrs = TierAttributes(volunteer=VolunteerAttributes(hours_12mo=20, consistency_6mo=True, role_type="youth"))
        assert evaluate_category_tier(Q.VOLUNTEER, attrs) == Tier.DEVELOPING

    def test_volunteer_anchor_by_recent_hours(self):
        attrs = TierAttributes(volunteer=VolunteerAttributes(hours_12mo=75))
        assert category_signals(Q.VOLUNTEER, attrs).anchor_met is True

    def test_education_anchor_levels(self):
        high_school = TierAttributes(education=EducationAttributes(level="High School", field_relevant=True))
        diploma = TierAttributes(education=EducationAttributes(level="College Diploma"))
        assert evaluate_category_tier(Q.EDUCATION, high_school) == Tier.NEEDS_IMPROVEMENT
        assert evaluate_category_tier(Q.EDUCATION, diploma) == Tier.COMPETITIVE

    def test_certs_skills_counts_licence_and_language(self):
        attrs = TierAttributes(
            certs=CertAttributes(cpr_c_current=True),
            skills=SkillAttributes(language_second=True),
            driver=DriverAttributes(licence_class="G"),
        )
        signals = category_signals(Q.CERTS_SKILLS, attrs)
        assert signals.anchor_met is True
        assert signals.supporting_met == 2

    def test_g2_is_not_anchor_licence(self):
        attrs = TierAttributes(driver=DriverAttributes(licence_class="G2"))
        assert category_signals(Q.CERTS_SKILLS, attrs).supporting_met == 0

    def test_references_need_three(self):
        attrs = TierAttributes(refs=ReferenceAttributes(count=2, diverse_contexts=True))
        assert evaluate_category_tier(Q.REFERENCES, attrs) == Tier.NEEDS_IMPROVEMENT

    def test_conduct(self):
        attrs = TierAttributes(conduct=ConductAttributes(no_major_issues=True, social_media_ack=True))
        assert evaluate_category_tier(Q.CONDUCT, attrs) == Tier.COMPETITIVE

    def test_empty_attributes_are_unknown(self):
        tiers = evaluate_all_tiers(TierAttributes())
        assert set(tiers) == set(QualitativeCategory)
        assert all(t == Tier.UNKNOWN for t in tiers.values())


class TestDeriveAttributes:
    def test_strong_profile(self, strong_profile, now):
        attrs = derive_attributes(ProfileData.from_raw(strong_profile), now)
        assert attrs.education.level == "University Degree"
        assert attrs.education.field_relevant is True
        assert attrs.work.relevant_months == 53
        assert attrs.work.continuity_ok is True
        assert attrs.work.shift_exposure is True
        assert attrs.volunteer.role_type == "youth"
        assert attrs.volunteer.consistency_6mo is True
        assert attrs.certs.cpr_c_current is True
        assert attrs.certs.mhfa is True
        assert attrs.certs.cpi_nvci is True
        assert attrs.skills.language_second is True
        assert attrs.refs.count == 3
        assert attrs.refs.diverse_contexts is True
        assert attrs.conduct.no_major_issues is True

    def test_strong_profile_tiers(self, strong_profile, now):
        tiers = evaluate_all_tiers(derive_attributes(ProfileData.from_raw(strong_profile), now))
        assert tiers == {
            Q.EDUCATION: Tier.COMPETITIVE,
            Q.WORK: Tier.EXCEPTIONAL,
            Q.VOLUNTEER: Tier.EXCEPTIONAL,
            Q.CERTS_SKILLS: Tier.EXCEPTIONAL,
            Q.REFERENCES: Tier.COMPETITIVE,
            Q.CONDUCT: Tier.EXCEPTIONAL,
        }

    def test_empty_profile(self, now):
        attrs = derive_attributes(ProfileData(), now)
        assert attrs.model_dump() == TierAttributes().model_dump()

    def test_mental_health_first_aid_is_not_cpr(self, now):
        profile = ProfileData.from_raw({"certs_details": [{"name": "Mental Health First Aid"}]})
        attrs = derive_attributes(profile, now)
        assert attrs.certs.mhfa is True
        assert attrs.certs.cpr_c_current is False


class TestStatusSummary:
    def test_work_summary(self):
        attrs = TierAttributes(work=WorkAttributes(fulltime_years=3, relevant_months=14, public_facing=True, leadership=True))
        assert category_status_summary(Q.WORK, attrs) == (
            "Experience anchor met (3y FT / 14m relevant) • public-facing • leadership"
        )

    def test_work_below_anchor(self):
        attrs = TierAttributes(work=WorkAttributes(fulltime_years=0.5))
        assert category_status_summary(Q.WORK, attrs) == "Experience below anchor (0.5y FT / 0m relevant)"

    def test_summary_follows_thresholds(self):
        attrs = TierAttributes(volunteer=VolunteerAttributes(hours_lifetime=100))
        assert category_status_summary(Q.VOLUNTEER, attrs).startswith("Service below anchor")
        relaxed = TierThresholds(volunteer_hours_lifetime_min=100)
        assert category_status_summary(Q.VOLUNTEER, attrs, relaxed).startswith("Service anchor met")

    def test_certs_summary(self):
        attrs = TierAttributes(certs=CertAttributes(mhfa=True), driver=DriverAttributes(licence_class="G"))
        assert category_status_summary(Q.CERTS_SKILLS, attrs) == "CPR-C missing • MHFA, G licence"

    def test_references_summary(self):
        attrs = TierAttributes(refs=ReferenceAttributes(count=1))
        assert category_status_summary(Q.REFERENCES, attrs) == "1 references (need 3+)"

    def test_every_category_has_a_summary(self):
        attrs = TierAttributes()
        for category in QualitativeCategory:
            assert category_status_summary(category, attrs)
