"""Rule predicates: one pure function per ``(category, rule_id)``.

A predicate returns the number of units its rule earns. Non-repeatable rules
treat any positive result as "matched once"; repeatable rules multiply the
units by the configured per-unit points. Point values never live here, they
come from the ruleset.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

from competitiveness.models.metrics import ResumeMetrics
from competitiveness.models.profile import CertEntry, ProfileData, WorkEntry
from competitiveness.models.ruleset import CategoryKey
from competitiveness.services.date_utils import month_diff, parse_month_date, parse_year_month
from competitiveness.services.resume_metrics import (
    is_post_secondary,
    latest_graduation_year,
    work_entry_months,
)

logger = logging.getLogger(__name__)

RELEVANT_EDU_RE = re.compile(
    r"police foundation|criminology|justice|criminal|psychology|sociology|law|legal"
    r"|public admin|public administration",
    re.IGNORECASE,
)
POLICE_FOUNDATIONS_RE = re.compile(r"police foundation", re.IGNORECASE)
# "Mental Health First Aid" is its own credential, not first aid/CPR
CPR_RE = re.compile(r"\bcpr\b|(?<!health )first aid", re.IGNORECASE)
MHFA_RE = re.compile(r"mental health first aid|\bmhfa\b", re.IGNORECASE)
DEESC_RE = re.compile(r"\bcpi\b|nvci|de-?escalation|crisis prevention", re.IGNORECASE)
NALOXONE_RE = re.compile(r"naloxone", re.IGNORECASE)
ASIST_RE = re.compile(r"\basist\b", re.IGNORECASE)
CUSTOMER_FACING_RE = re.compile(
    r"retail|hospitality|customer|front desk|call centre|call center", re.IGNORECASE
)
CUSTOMER_SERVICE_RE = re.compile(r"retail|hospitality|call centre|call center", re.IGNORECASE)
PROFICIENT_LANGUAGE_RE = re.compile(r"professional|native", re.IGNORECASE)

FULL_LICENCE_CLASSES = frozenset({"G", "G2"})


@dataclass(frozen=True)
class RuleContext:
    """Everything a predicate may read. Built once per evaluation."""
    profile: ProfileData
    metrics: ResumeMetrics
    now: date


Predicate = Callable[[RuleContext], int | bool]

RULE_PREDICATES: dict[tuple[CategoryKey, str], Predicate] = {}


def predicate(category: CategoryKey, rule_id: str) -> Callable[[Predicate], Predicate]:
    """Register a predicate for ``rule_id`` within ``category``."""
    def register(fn: Predicate) -> Predicate:
        key = (category, rule_id)
        if key in RULE_PREDICATES:
            raise ValueError(f"predicate already registered for {category.value}/{rule_id}")
        RULE_PREDICATES[key] = fn
        return fn
    return register


def get_predicate(category: CategoryKey, rule_id: str) -> Predicate | None:
    return RULE_PREDICATES.get((category, rule_id))


def rule_units(category: CategoryKey, rule_id: str, ctx: RuleContext) -> int:
    """Units earned by a rule; unknown ids earn nothing."""
    fn = get_predicate(category, rule_id)
    if fn is None:
        logger.debug("No predicate for %s/%s, scoring 0", category.value, rule_id)
        return 0
    return max(0, int(fn(ctx)))


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def has_public_facing_history(entries: list[WorkEntry]) -> bool:
    return any(
        "customer-facing" in e.police_relevant or CUSTOMER_FACING_RE.search(e.role or e.title or "")
        for e in entries
    )


def has_shift_exposure(entries: list[WorkEntry]) -> bool:
    return any("shift work" in e.police_relevant for e in entries)


def has_relevant_program(profile: ProfileData) -> bool:
    return any(RELEVANT_EDU_RE.search(e.program_text) for e in profile.education_details)


def has_cert(certs: list[CertEntry], pattern: re.Pattern, tag: str) -> bool:
    return any(pattern.search(c.name or "") or c.type == tag for c in certs)


def months_since_latest_cert(certs: list[CertEntry], now: date) -> int | None:
    # Future-dated issues are not yet earned
    issued = [
        d for d in (parse_month_date(c.issue_date) for c in certs)
        if d is not None and d <= now
    ]
    if not issued:
        return None
    return month_diff(max(issued), now)


def education_recency_years(profile: ProfileData, now: date) -> int | None:
    year = latest_graduation_year(profile.education_details, not_after=now.year)
    return now.year - year if year else None


def recent_education_end(profile: ProfileData, now: date, within_years: int = 2) -> bool:
    for e in profile.education_details:
        ym = parse_year_month(e.end_date)
        if ym and ym.to_date() <= now and now.year - ym.year <= within_years:
            return True
    return False


def has_proficient_second_language(profile: ProfileData) -> bool:
    return any(PROFICIENT_LANGUAGE_RE.search(lang.proficiency or "") for lang in profile.skills_languages)


def customer_service_months(profile: ProfileData, now: date) -> float:
    return sum(
        work_entry_months(e, now)
        for e in profile.work_history
        if CUSTOMER_SERVICE_RE.search(e.role or e.title or "")
    )


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

EDU = CategoryKey.EDUCATION


@predicate(EDU, "bachelor_relevant")
def _bachelor_relevant(ctx: RuleContext) -> bool:
    return ctx.metrics.education.highest_credential_score >= 4 and has_relevant_program(ctx.profile)


@predicate(EDU, "diploma_police_foundations")
def _diploma_police_foundations(ctx: RuleContext) -> bool:
    is_diploma = ctx.metrics.education.highest_credential_score in (2, 3)
    return is_diploma and any(
        POLICE_FOUNDATIONS_RE.search(e.program or "") for e in ctx.profile.education_details
    )


@predicate(EDU, "any_post_secondary")
def _any_post_secondary(ctx: RuleContext) -> bool:
    return ctx.metrics.education.highest_credential_score >= 2


@predicate(EDU, "extra_post_secondary")
def _extra_post_secondary(ctx: RuleContext) -> int:
    # Every post-secondary credential beyond the first
    count = sum(1 for e in ctx.profile.education_details if is_post_secondary(e))
    return max(0, count - 1)


@predicate(EDU, "high_school_only")
def _high_school_only(ctx: RuleContext) -> bool:
    return bool(ctx.profile.education_details) and ctx.metrics.education.highest_credential_score == 0


@predicate(EDU, "recent_grad_bonus")
def _recent_grad_bonus(ctx: RuleContext) -> bool:
    years = education_recency_years(ctx.profile, ctx.now)
    return years is not None and 0 <= years <= 5


@predicate(EDU, "cont_ed_recent_24m")
def _cont_ed_recent(ctx: RuleContext) -> bool:
    return recent_education_end(ctx.profile, ctx.now)


@predicate(EDU, "transcript_verified")
def _transcript_verified(ctx: RuleContext) -> bool:
    return ctx.profile.transcript_verified is True


# ---------------------------------------------------------------------------
# Work
# ---------------------------------------------------------------------------

WORK = CategoryKey.WORK


@predicate(WORK, "relevant_3y_plus")
def _relevant_3y_plus(ctx: RuleContext) -> bool:
    return ctx.metrics.work.police_related_years >= 3


@predicate(WORK, "relevant_1to2y")
def _relevant_1to2y(ctx: RuleContext) -> bool:
    return 1 <= ctx.metrics.work.police_related_years < 3


@predicate(WORK, "nonrel_leadership_3y_plus")
def _nonrel_leadership(ctx: RuleContext) -> bool:
    has_lead = any(e.leadership for e in ctx.profile.work_history)
    return ctx.metrics.work.total_years_worked >= 3 and has_lead


@predicate(WORK, "ft_2y_plus")
def _ft_2y_plus(ctx: RuleContext) -> bool:
    return ctx.metrics.work.full_time_years >= 2


@predicate(WORK, "ft_1to2y")
def _ft_1to2y(ctx: RuleContext) -> bool:
    return 1 <= ctx.metrics.work.full_time_years < 2


@predicate(WORK, "under_1y")
def _under_1y(ctx: RuleContext) -> bool:
    return bool(ctx.profile.work_history) and ctx.metrics.work.total_years_worked < 1


@predicate(WORK, "public_facing_history")
def _public_facing(ctx: RuleContext) -> bool:
    return has_public_facing_history(ctx.profile.work_history)


@predicate(WORK, "shift_exposure")
def _shift_exposure(ctx: RuleContext) -> bool:
    return has_shift_exposure(ctx.profile.work_history)


@predicate(WORK, "continuity_no_gaps_6mo")
def _continuity(ctx: RuleContext) -> bool:
    # Approximation: 2.5+ full-time years stands in for gap detection
    return ctx.metrics.work.full_time_years >= 2.5


@predicate(WORK, "employment_letter_verified")
def _employment_letter_verified(ctx: RuleContext) -> bool:
    return ctx.profile.employment_letter_verified is True


# ---------------------------------------------------------------------------
# Volunteer
# ---------------------------------------------------------------------------

VOL = CategoryKey.VOLUNTEER


def _monthly_average_last_12(ctx: RuleContext) -> float:
    return ctx.metrics.volunteer.last_12_months_volunteer_hours / 12


@predicate(VOL, "committed_8h_12m")
def _committed(ctx: RuleContext) -> bool:
    return ctx.metrics.volunteer.commitment_months >= 12 and _monthly_average_last_12(ctx) >= 8


@predicate(VOL, "steady_4h_6m")
def _steady(ctx: RuleContext) -> bool:
    avg = _monthly_average_last_12(ctx)
    return ctx.metrics.volunteer.commitment_months >= 6 and 4 <= avg < 8


@predicate(VOL, "occasional")
def _occasional(ctx: RuleContext) -> bool:
    return ctx.metrics.volunteer.total_volunteer_hours > 0


@predicate(VOL, "vol_lead_role")
def _vol_lead_role(ctx: RuleContext) -> bool:
    return any(v.lead_role for v in ctx.profile.volunteer_history)


@predicate(VOL, "hours_lifetime_150")
def _hours_lifetime(ctx: RuleContext) -> bool:
    return ctx.metrics.volunteer.total_volunteer_hours >= 150


@predicate(VOL, "hours_12m_75")
def _hours_12m(ctx: RuleContext) -> bool:
    return ctx.metrics.volunteer.last_12_months_volunteer_hours >= 75


# ---------------------------------------------------------------------------
# Certifications
# ---------------------------------------------------------------------------

CERTS = CategoryKey.CERTS


@predicate(CERTS, "cpr_c_current")
def _cpr(ctx: RuleContext) -> bool:
    return has_cert(ctx.profile.certs_details, CPR_RE, "cpr_c")


@predicate(CERTS, "mh_first_aid")
def _mhfa(ctx: RuleContext) -> bool:
    return has_cert(ctx.profile.certs_details, MHFA_RE, "mhfa")


@predicate(CERTS, "deescalation")
def _deescalation(ctx: RuleContext) -> bool:
    return has_cert(ctx.profile.certs_details, DEESC_RE, "cpi_nvci")


@predicate(CERTS, "extra_relevant_cert")
def _extra_relevant_cert(ctx: RuleContext) -> int:
    # Named certificates not already covered by the anchor rules
    count = 0
    for c in ctx.profile.certs_details:
        name = c.name or ""
        if not name or CPR_RE.search(name) or MHFA_RE.search(name) or DEESC_RE.search(name):
            continue
        count += 1
    return count


@predicate(CERTS, "naloxone_trained")
def _naloxone(ctx: RuleContext) -> bool:
    return has_cert(ctx.profile.certs_details, NALOXONE_RE, "naloxone")


@predicate(CERTS, "credential_recent_24m")
def _credential_recent(ctx: RuleContext) -> bool:
    months = months_since_latest_cert(ctx.profile.certs_details, ctx.now)
    return months is not None and 0 <= months <= 24


# ---------------------------------------------------------------------------
# Fitness
# ---------------------------------------------------------------------------

FIT = CategoryKey.FITNESS


@predicate(FIT, "prep_pass_6m")
def _prep_pass(ctx: RuleContext) -> bool:
    return ctx.profile.fitness_prep_observed_verified is True


@predicate(FIT, "strong_indicators")
def _strong_indicators(ctx: RuleContext) -> bool:
    return ctx.profile.fitness_prep_observed_verified is True


@predicate(FIT, "average_indicators")
def _average_indicators(ctx: RuleContext) -> bool:
    return ctx.profile.fitness_prep_digital_attempted is True


@predicate(FIT, "below_avg_or_unknown")
def _below_average(ctx: RuleContext) -> bool:
    # Only once fitness status was reported and neither signal is positive
    observed = ctx.profile.fitness_prep_observed_verified
    digital = ctx.profile.fitness_prep_digital_attempted
    reported = observed is not None or digital is not None
    return reported and observed is not True and digital is not True


# ---------------------------------------------------------------------------
# Driving
# ---------------------------------------------------------------------------

DRV = CategoryKey.DRIVING


def _full_licence(ctx: RuleContext) -> bool:
    return (ctx.profile.driver_licence_class or "").strip().upper() in FULL_LICENCE_CLASSES


@predicate(DRV, "full_license_clean_24m")
def _full_clean(ctx: RuleContext) -> bool:
    return _full_licence(ctx) and ctx.profile.driver_clean_abstract is True


@predicate(DRV, "one_minor_infraction")
def _one_minor(ctx: RuleContext) -> bool:
    return _full_licence(ctx) and ctx.profile.driver_clean_abstract is not True


@predicate(DRV, "multi_minor")
def _multi_minor(ctx: RuleContext) -> bool:
    # Infraction counts are not collected yet
    return False


# ---------------------------------------------------------------------------
# Background
# ---------------------------------------------------------------------------

BG = CategoryKey.BACKGROUND


def _conduct_clean(ctx: RuleContext) -> bool:
    return ctx.profile.conduct_no_major_issues is True


@predicate(BG, "clean_all")
def _clean_all(ctx: RuleContext) -> bool:
    return _conduct_clean(ctx)


@predicate(BG, "minor_credit")
def _minor_credit(ctx: RuleContext) -> bool:
    return _conduct_clean(ctx)


@predicate(BG, "discipline_or_credit_trend")
def _discipline_or_credit(ctx: RuleContext) -> bool:
    return _conduct_clean(ctx)


@predicate(BG, "social_media_ack")
def _social_media_ack(ctx: RuleContext) -> bool:
    return ctx.profile.social_media_ack is True


# ---------------------------------------------------------------------------
# Soft skills
# ---------------------------------------------------------------------------

SOFT = CategoryKey.SOFTSKILLS


@predicate(SOFT, "leadership_role")
def _leadership_role(ctx: RuleContext) -> bool:
    return ctx.profile.has_leadership


@predicate(SOFT, "customer_service_1y")
def _customer_service(ctx: RuleContext) -> int:
    # Two units for a year or more of customer service, one for any exposure
    if customer_service_months(ctx.profile, ctx.now) >= 12:
        return 2
    return 1 if has_public_facing_history(ctx.profile.work_history) else 0


@predicate(SOFT, "second_language_proficient")
def _second_language(ctx: RuleContext) -> bool:
    return has_proficient_second_language(ctx.profile)


@predicate(SOFT, "skills_two_plus")
def _skills_two_plus(ctx: RuleContext) -> bool:
    return len(ctx.profile.skills_details) >= 2


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------

REFS = CategoryKey.REFERENCES


@predicate(REFS, "three_refs_mock_done")
def _three_refs(ctx: RuleContext) -> bool:
    return len(ctx.profile.refs_list) >= 3


@predicate(REFS, "two_refs_or_some_prep")
def _two_refs(ctx: RuleContext) -> bool:
    return len(ctx.profile.refs_list) == 2


@predicate(REFS, "minimal")
def _one_ref(ctx: RuleContext) -> bool:
    return len(ctx.profile.refs_list) == 1


@predicate(REFS, "tenure_two_refs_2y")
def _tenure_refs(ctx: RuleContext) -> bool:
    refs = ctx.profile.refs_list
    return len(refs) >= 3 and sum(1 for r in refs if r.known_2y) >= 2


# ---------------------------------------------------------------------------
# Disqualifiers
# ---------------------------------------------------------------------------

DisqualifierPredicate = Callable[[ProfileData], bool]

DISQUALIFIER_PREDICATES: dict[str, DisqualifierPredicate] = {
    "criminal_open_or_recent_conviction": lambda p: p.conduct_no_major_issues is False,
    "dishonesty": lambda p: p.integrity_dishonesty is True,
    "recent_major_driving_offense": lambda p: p.driving_recent_major_offence is True,
}
