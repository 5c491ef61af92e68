"""Qualitative tier classifier: anchor plus supporting evidence, no weights.

Each category answers three questions: is there any information at all, is
the one strong anchor signal met, and how many secondary signals hold. The
tier follows directly:

    no information                  → Unknown
    anchor and 2+ supporting        → Exceptional
    anchor alone                    → Competitive
    no anchor but 2+ supporting     → Developing
    otherwise                       → Needs Improvement
"""

import logging
import re
from datetime import date
from typing import Callable, Sequence

from competitiveness.models.profile import EducationEntry, ProfileData
from competitiveness.models.ruleset import TierThresholds
from competitiveness.models.tiers import (
    CertAttributes,
    ConductAttributes,
    DriverAttributes,
    EducationAttributes,
    FitnessAttributes,
    QualitativeCategory,
    ReferenceAttributes,
    SkillAttributes,
    Tier,
    TierAttributes,
    TierSignals,
    VolunteerAttributes,
    WorkAttributes,
)
from competitiveness.services.resume_metrics import (
    compute_resume_metrics,
    rank_credential,
)
from competitiveness.services.rule_predicates import (
    ASIST_RE,
    CPR_RE,
    DEESC_RE,
    MHFA_RE,
    NALOXONE_RE,
    has_cert,
    has_proficient_second_language,
    has_public_facing_history,
    has_relevant_program,
    has_shift_exposure,
    recent_education_end,
)

logger = logging.getLogger(__name__)

SUPPORTING_FOR_STRONG_TIER = 2
CONTINUITY_FULL_TIME_YEARS = 2.5
CONSISTENCY_MONTHS = 6
FOCUS_ROLE_TYPES = frozenset({"youth", "seniors", "vulnerable", "coaching", "community_safety"})
ANCHOR_LICENCE_CLASS = "G"

POSTGRAD = "Postgrad"
UNIVERSITY_DEGREE = "University Degree"
COLLEGE_DIPLOMA = "College Diploma"
HIGH_SCHOOL = "High School"
HIGH_SCHOOL_RE = re.compile(r"high|secondary|grade\s*12|\bhs\b|\bged\b", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Education level normalization
# ---------------------------------------------------------------------------

def normalize_education_level(text: str) -> tuple[int, str]:
    """Collapse a credential string to ``(rank 0..4, qualitative label)``.

    Unrecognized text keeps its own wording and ranks 0.
    """
    score, _ = rank_credential(text)
    if score >= 5:
        return 4, POSTGRAD
    if score == 4:
        return 3, UNIVERSITY_DEGREE
    if score >= 2:
        return 2, COLLEGE_DIPLOMA
    if score == 0 and HIGH_SCHOOL_RE.search(text or ""):
        return 1, HIGH_SCHOOL
    return 0, (text or "").strip()


def highest_education_level(entries: Sequence[EducationEntry], fallback: str = "") -> str:
    """Best qualitative level across all entries (and an optional fallback level)."""
    texts = [e.credential_text for e in entries if e.credential_text]
    if fallback:
        texts.append(fallback)
    best_rank, best_label = -1, ""
    for text in texts:
        rank, label = normalize_education_level(text)
        if rank > best_rank:
            best_rank, best_label = rank, label
    return best_label or fallback


# ---------------------------------------------------------------------------
# Attribute derivation
# ---------------------------------------------------------------------------

def derive_attributes(profile: ProfileData, now: date | None = None) -> TierAttributes:
    """Build classifier attributes from the same raw profile the numeric path reads.

    Signals that need an external verification step (frontline confirmation,
    reference contact checks) are left unset.
    """
    now = now or date.today()
    metrics = compute_resume_metrics(profile, now)
    certs = profile.certs_details
    refs = profile.refs_list
    role_types = [v.role_type.strip().lower() for v in profile.volunteer_history if v.role_type]

    return TierAttributes(
        education=EducationAttributes(
            level=highest_education_level(profile.education_details),
            field_relevant=has_relevant_program(profile),
            cont_ed_recent=recent_education_end(profile, now),
        ),
        work=WorkAttributes(
            fulltime_years=metrics.work.full_time_years,
            relevant_months=metrics.work.police_related_months,
            public_facing=has_public_facing_history(profile.work_history),
            continuity_ok=metrics.work.full_time_years >= CONTINUITY_FULL_TIME_YEARS,
            leadership=any(w.leadership for w in profile.work_history),
            shift_exposure=has_shift_exposure(profile.work_history),
        ),
        volunteer=VolunteerAttributes(
            hours_lifetime=metrics.volunteer.total_volunteer_hours,
            hours_12mo=metrics.volunteer.last_12_months_volunteer_hours,
            consistency_6mo=(
                metrics.volunteer.commitment_months >= CONSISTENCY_MONTHS
                and metrics.volunteer.last_12_months_volunteer_hours > 0
            ),
            role_type=role_types[0] if role_types else "",
            lead_role=any(v.lead_role for v in profile.volunteer_history),
        ),
        certs=CertAttributes(
            cpr_c_current=has_cert(certs, CPR_RE, "cpr_c"),
            mhfa=has_cert(certs, MHFA_RE, "mhfa"),
            cpi_nvci=has_cert(certs, DEESC_RE, "cpi_nvci"),
            asist=has_cert(certs, ASIST_RE, "asist"),
            naloxone_trained=has_cert(certs, NALOXONE_RE, "naloxone"),
        ),
        skills=SkillAttributes(language_second=has_proficient_second_language(profile)),
        driver=DriverAttributes(
            licence_class=(profile.driver_licence_class or "").strip().upper(),
            clean_abstract=profile.driver_clean_abstract is True,
        ),
        fitness=FitnessAttributes(
            prep_digital_attempted=profile.fitness_prep_digital_attempted is True,
        ),
        refs=ReferenceAttributes(
            count=len(refs),
            diverse_contexts=(
                any(r.diverse_context for r in refs)
                or len({r.context.strip().lower() for r in refs if r.context}) >= 2
            ),
        ),
        conduct=ConductAttributes(
            no_major_issues=profile.conduct_no_major_issues is True,
            clean_driving_24mo=profile.driver_clean_abstract is True,
            social_media_ack=profile.social_media_ack is True,
        ),
        has_work_history=bool(profile.work_history),
        has_volunteer_history=bool(profile.volunteer_history),
        has_refs_list=bool(refs),
    )


# ---------------------------------------------------------------------------
# Signals per category
# ---------------------------------------------------------------------------

def _education_signals(a: TierAttributes, t: TierThresholds) -> TierSignals:
    edu = a.education
    return TierSignals(
        anchor_met=edu.level in t.education_anchor_levels,
        supporting_met=sum([edu.field_relevant, edu.cont_ed_recent]),
        info_present=bool(edu.level or edu.field_relevant or edu.cont_ed_recent),
    )


def _work_anchor(w: WorkAttributes, t: TierThresholds) -> bool:
    return (
        w.frontline_public_safety_12m
        or w.fulltime_years >= t.work_fulltime_years_min
        or w.relevant_months >= t.work_relevant_months_min
    )


def _work_signals(a: TierAttributes, t: TierThresholds) -> TierSignals:
    w = a.work
    flags = [w.public_facing, w.continuity_ok, w.leadership, w.shift_exposure]
    return TierSignals(
        anchor_met=_work_anchor(w, t),
        supporting_met=sum(flags),
        info_present=w.fulltime_years > 0 or w.relevant_months > 0 or any(flags) or a.has_work_history,
    )


def _volunteer_anchor(v: VolunteerAttributes, t: TierThresholds) -> bool:
    return v.hours_lifetime >= t.volunteer_hours_lifetime_min or v.hours_12mo >= t.volunteer_hours_12mo_min


def _volunteer_signals(a: TierAttributes, t: TierThresholds) -> TierSignals:
    v = a.volunteer
    return TierSignals(
        anchor_met=_volunteer_anchor(v, t),
        supporting_met=sum([v.consistency_6mo, v.role_type in FOCUS_ROLE_TYPES, v.lead_role]),
        info_present=(
            v.hours_lifetime > 0 or v.hours_12mo > 0 or v.consistency_6mo
            or bool(v.role_type) or v.lead_role or a.has_volunteer_history
        ),
    )


def _certs_skills_signals(a: TierAttributes, t: TierThresholds) -> TierSignals:
    c, s, d, f = a.certs, a.skills, a.driver, a.fitness
    licence_g = d.licence_class == ANCHOR_LICENCE_CLASS
    core = [c.mhfa, c.cpi_nvci, c.asist, s.language_second, licence_g, d.clean_abstract, f.prep_digital_attempted]
    extra = [c.naloxone_trained, c.deescalation_advanced, s.priority_language, c.cpr_valid_6mo, f.pin_digital_attempts_3]
    return TierSignals(
        anchor_met=c.cpr_c_current,
        supporting_met=sum(core) + sum(extra),
        info_present=c.cpr_c_current or any(core),
    )


def _references_signals(a: TierAttributes, t: TierThresholds) -> TierSignals:
    r = a.refs
    return TierSignals(
        anchor_met=r.count >= 3,
        supporting_met=sum([
            r.diverse_contexts, r.confirmed_recent, r.supervisor_within_12mo,
            r.no_family, r.contactable_verified,
        ]),
        info_present=r.count > 0 or r.diverse_contexts or r.confirmed_recent or a.has_refs_list,
    )


def _conduct_signals(a: TierAttributes, t: TierThresholds) -> TierSignals:
    c = a.conduct
    return TierSignals(
        anchor_met=c.no_major_issues,
        supporting_met=sum([c.clean_driving_24mo, c.social_media_ack]),
        info_present=c.no_major_issues or c.clean_driving_24mo or c.social_media_ack,
    )


SignalBuilder = Callable[[TierAttributes, TierThresholds], TierSignals]

SIGNAL_BUILDERS: dict[QualitativeCategory, SignalBuilder] = {
    QualitativeCategory.EDUCATION: _education_signals,
    QualitativeCategory.WORK: _work_signals,
    QualitativeCategory.VOLUNTEER: _volunteer_signals,
    QualitativeCategory.CERTS_SKILLS: _certs_skills_signals,
    QualitativeCategory.REFERENCES: _references_signals,
    QualitativeCategory.CONDUCT: _conduct_signals,
}


def category_signals(
    category: QualitativeCategory,
    attributes: TierAttributes,
    thresholds: TierThresholds | None = None,
) -> TierSignals:
    return SIGNAL_BUILDERS[category](attributes, thresholds or TierThresholds())


def classify_tier(signals: TierSignals) -> Tier:
    has_info = signals.info_present or signals.anchor_met or signals.supporting_met > 0
    if not has_info:
        return Tier.UNKNOWN
    if signals.anchor_met and signals.supporting_met >= SUPPORTING_FOR_STRONG_TIER:
        return Tier.EXCEPTIONAL
    if signals.anchor_met:
        return Tier.COMPETITIVE
    if signals.supporting_met >= SUPPORTING_FOR_STRONG_TIER:
        return Tier.DEVELOPING
    return Tier.NEEDS_IMPROVEMENT


def evaluate_category_tier(
    category: QualitativeCategory,
    attributes: TierAttributes,
    thresholds: TierThresholds | None = None,
) -> Tier:
    return classify_tier(category_signals(category, attributes, thresholds))


def evaluate_all_tiers(
    attributes: TierAttributes, thresholds: TierThresholds | None = None
) -> dict[QualitativeCategory, Tier]:
    tiers = {cat: evaluate_category_tier(cat, attributes, thresholds) for cat in QualitativeCategory}
    logger.debug("Qualitative tiers: %s", {c.value: t.value for c, t in tiers.items()})
    return tiers


# ---------------------------------------------------------------------------
# Status summaries
# ---------------------------------------------------------------------------

SEPARATOR = " • "


def _education_summary(a: TierAttributes, t: TierThresholds) -> list[str]:
    edu = a.education
    parts = [f"Has {edu.level}" if edu.level in t.education_anchor_levels else "No post-secondary credential yet"]
    if edu.field_relevant:
        parts.append("relevant field")
    if edu.cont_ed_recent:
        parts.append("recent upskilling")
    return parts


def _work_summary(a: TierAttributes, t: TierThresholds) -> list[str]:
    w = a.work
    figures = f"({w.fulltime_years:g}y FT / {w.relevant_months:g}m relevant)"
    if w.frontline_public_safety_12m:
        parts = ["Anchor met (frontline 12m)"]
    elif _work_anchor(w, t):
        parts = [f"Experience anchor met {figures}"]
    else:
        parts = [f"Experience below anchor {figures}"]
    for flag, label in (
        (w.public_facing, "public-facing"),
        (w.continuity_ok, "continuous"),
        (w.leadership, "leadership"),
        (w.shift_exposure, "shift exposure"),
    ):
        if flag:
            parts.append(label)
    return parts


def _volunteer_summary(a: TierAttributes, t: TierThresholds) -> list[str]:
    v = a.volunteer
    figures = f"({v.hours_lifetime:g}h lifetime / {v.hours_12mo:g}h 12mo)"
    met = _volunteer_anchor(v, t)
    parts = [f"Service anchor met {figures}" if met else f"Service below anchor {figures}"]
    if v.consistency_6mo:
        parts.append("consistent (6+ mo)")
    if v.role_type:
        parts.append(f"role: {v.role_type}")
    if v.lead_role:
        parts.append("lead role")
    return parts


def _certs_skills_summary(a: TierAttributes, t: TierThresholds) -> list[str]:
    c, s, d = a.certs, a.skills, a.driver
    parts = ["CPR-C current" if c.cpr_c_current else "CPR-C missing"]
    extras = [
        label for flag, label in (
            (c.mhfa, "MHFA"),
            (c.cpi_nvci, "CPI/NVCI"),
            (c.asist, "ASIST"),
            (s.language_second, "2nd language"),
            (d.licence_class == ANCHOR_LICENCE_CLASS, "G licence"),
            (d.clean_abstract, "clean abstract"),
        ) if flag
    ]
    if extras:
        parts.append(", ".join(extras))
    return parts


def _references_summary(a: TierAttributes, t: TierThresholds) -> list[str]:
    r = a.refs
    parts = [f"{r.count} references" if r.count >= 3 else f"{r.count} references (need 3+)"]
    if r.diverse_contexts:
        parts.append("diverse contexts")
    if r.confirmed_recent:
        parts.append("confirmed recently")
    return parts


def _conduct_summary(a: TierAttributes, t: TierThresholds) -> list[str]:
    c = a.conduct
    parts = ["no major issues" if c.no_major_issues else "issues present"]
    if c.clean_driving_24mo:
        parts.append("clean driving (24 mo)")
    if c.social_media_ack:
        parts.append("social media policy acknowledged")
    return parts


SUMMARY_BUILDERS: dict[QualitativeCategory, Callable[[TierAttributes, TierThresholds], list[str]]] = {
    QualitativeCategory.EDUCATION: _education_summary,
    QualitativeCategory.WORK: _work_summary,
    QualitativeCategory.VOLUNTEER: _volunteer_summary,
    QualitativeCategory.CERTS_SKILLS: _certs_skills_summary,
    QualitativeCategory.REFERENCES: _references_summary,
    QualitativeCategory.CONDUCT: _conduct_summary,
}


def category_status_summary(
    category: QualitativeCategory,
    attributes: TierAttributes,
    thresholds: TierThresholds | None = None,
) -> str:
    """Human-readable status line, e.g. "Experience anchor met (3y FT / 14m relevant) • leadership"."""
    parts = SUMMARY_BUILDERS[category](attributes, thresholds or TierThresholds())
    return SEPARATOR.join(parts)
