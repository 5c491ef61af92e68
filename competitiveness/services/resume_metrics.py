"""Derive aggregate work, volunteer and education metrics from raw history.

These functions are pure: the same entries and ``now`` always produce the
same metrics, and missing or malformed dates contribute nothing.
"""

import logging
import re
from datetime import date
from typing import Sequence

from competitiveness.models.metrics import (
    EducationMetrics,
    ResumeMetrics,
    VolunteerMetrics,
    WorkMetrics,
)
from competitiveness.models.profile import (
    EducationEntry,
    ProfileData,
    VolunteerEntry,
    WorkEntry,
)
from competitiveness.services.date_utils import (
    WEEKS_PER_MONTH,
    month_diff,
    months_between,
    parse_year_month,
    shift_months,
)

logger = logging.getLogger(__name__)

# Curated role list entries that count as police-related experience
POLICE_RELATED_ROLES = frozenset({
    "Security Guard",
    "Corrections Officer",
    "By-law Officer",
    "Border Services",
    "EMS Support",
    "Shelter/Crisis Worker",
})

FULL_TIME_HOURS_PER_WEEK = 30

# Ordered highest first; the first pattern that matches decides the rank.
# High-school credentials are checked before "diploma" so that
# "High School Diploma" does not rank as a college diploma.
EDUCATION_RANKS: tuple[tuple[re.Pattern, int, str], ...] = (
    (re.compile(r"phd|doctor"), 7, "PhD/Doctorate"),
    (re.compile(r"master|msc|\bma\b|mba"), 6, "Master's"),
    (re.compile(r"post\s?-?grad"), 5, "Post-Grad Certificate"),
    (re.compile(r"bachelor|university"), 4, "Bachelor's/University Degree"),
    (re.compile(r"advanced diploma|3[- ]?year"), 3, "Advanced Diploma (3-year)"),
    (re.compile(r"high\s*school|secondary\s*school|grade\s*12|\bged\b|\bossd\b"), 0, "High School/Other"),
    (re.compile(r"diploma|college"), 2, "College Diploma (2-year)"),
    (re.compile(r"certificate"), 1, "Certificate (incl. online)"),
)
_FALLBACK_RANK = (0, "High School/Other")

POST_SECONDARY_MIN_SCORE = 2


# ---------------------------------------------------------------------------
# Work
# ---------------------------------------------------------------------------

def work_entry_months(entry: WorkEntry, now: date | None = None) -> float:
    """Months covered by one job; a numeric legacy ``months`` field wins."""
    if entry.months is not None:
        return max(0.0, entry.months)
    return months_between(entry.start_ym, entry.end_ym, entry.current, now)


def is_police_related(entry: WorkEntry) -> bool:
    return entry.role_label in POLICE_RELATED_ROLES


def compute_work_metrics(entries: Sequence[WorkEntry], now: date | None = None) -> WorkMetrics:
    total_months = 0.0
    police_months = 0.0
    full_time_months = 0.0
    total_hours = 0.0

    for entry in entries:
        months = work_entry_months(entry, now)
        total_months += months
        if is_police_related(entry):
            police_months += months

        hpw = entry.hours_per_week
        # Unknown hours count as full-time: missing data should not penalize
        if hpw is None or hpw >= FULL_TIME_HOURS_PER_WEEK:
            full_time_months += months
        if hpw is not None:
            total_hours += hpw * months * WEEKS_PER_MONTH

    return WorkMetrics(
        total_months_worked=total_months,
        total_years_worked=round(total_months / 12, 2),
        police_related_months=police_months,
        police_related_years=round(police_months / 12, 2),
        full_time_months=full_time_months,
        full_time_years=round(full_time_months / 12, 2),
        total_work_hours=round(total_hours, 0),
    )


# ---------------------------------------------------------------------------
# Volunteer
# ---------------------------------------------------------------------------

def _volunteer_entry_hours(entry: VolunteerEntry, now: date) -> float:
    explicit = entry.explicit_total_hours
    if explicit is not None:
        return explicit
    if entry.hours_per_week is not None:
        months = months_between(entry.start_ym, entry.end_date, entry.current, now)
        return entry.hours_per_week * months * WEEKS_PER_MONTH
    return 0.0


def _volunteer_range(entry: VolunteerEntry, now: date) -> tuple[date, date] | None:
    start_ym = parse_year_month(entry.start_ym)
    if start_ym is None:
        return None
    start = start_ym.to_date()
    if entry.current:
        return start, now
    end_ym = parse_year_month(entry.end_date)
    # A one-off entry occupies just its start month
    return start, end_ym.to_date() if end_ym else start


def compute_volunteer_metrics(
    entries: Sequence[VolunteerEntry], now: date | None = None
) -> VolunteerMetrics:
    now = now or date.today()
    window_start = shift_months(now, -12)

    total_hours = 0.0
    last_12_hours = 0.0
    earliest: date | None = None
    latest: date | None = None

    for entry in entries:
        total_hours += _volunteer_entry_hours(entry, now)

        active = _volunteer_range(entry, now)
        if active is None:
            continue
        start, end = active
        if earliest is None or start < earliest:
            earliest = start
        if latest is None or end > latest:
            latest = end

        # Hours inside the trailing [now - 12 months, now] window
        if entry.hours_per_week is not None:
            window_end = min(end, now)
            if window_end >= window_start:
                months_in_window = max(0, month_diff(max(start, window_start), window_end))
                last_12_hours += entry.hours_per_week * months_in_window * WEEKS_PER_MONTH
        elif entry.explicit_total_hours is not None and end >= window_start:
            # Only a total is known: count it fully if it ended within the window
            last_12_hours += entry.explicit_total_hours

    span_months = 0
    if earliest is not None and latest is not None and latest > earliest:
        span_months = max(0, month_diff(earliest, latest))
    span_years = span_months / 12

    return VolunteerMetrics(
        total_volunteer_hours=round(total_hours, 0),
        avg_volunteer_hours_per_year=round(total_hours / max(span_years, 1), 0),
        last_12_months_volunteer_hours=round(last_12_hours, 0),
        commitment_months=max(1, span_months),
    )


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

def rank_credential(text: str) -> tuple[int, str]:
    """Map free-text credential level to ``(score 0..7, canonical label)``."""
    lowered = (text or "").lower()
    for pattern, score, label in EDUCATION_RANKS:
        if pattern.search(lowered):
            return score, label
    return _FALLBACK_RANK


def is_post_secondary(entry: EducationEntry) -> bool:
    return rank_credential(entry.credential_text)[0] >= POST_SECONDARY_MIN_SCORE


def latest_graduation_year(
    entries: Sequence[EducationEntry], not_after: int | None = None
) -> int | None:
    """Most recent graduation year, ignoring years after ``not_after``."""
    latest = None
    for entry in entries:
        ym = parse_year_month(entry.end_date)
        year = ym.year if ym else entry.year
        if not year or (not_after is not None and year > not_after):
            continue
        if latest is None or year > latest:
            latest = year
    return latest


def compute_education_metrics(entries: Sequence[EducationEntry]) -> EducationMetrics:
    """Pick the single highest-ranked credential across all entries.

    Entries may be listed in any order; position never matters.
    """
    best_score = -1
    best_rank = "Unknown"
    best_label = "Unknown"
    for entry in entries:
        text = entry.credential_text
        score, rank = rank_credential(text)
        if score > best_score:
            best_score, best_rank, best_label = score, rank, text or rank

    if best_score < 0:
        return EducationMetrics()
    return EducationMetrics(
        highest_credential_label=best_label,
        highest_credential_rank=best_rank,
        highest_credential_score=best_score,
    )


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------

def compute_resume_metrics(profile: ProfileData, now: date | None = None) -> ResumeMetrics:
    now = now or date.today()
    metrics = ResumeMetrics(
        work=compute_work_metrics(profile.work_history, now),
        volunteer=compute_volunteer_metrics(profile.volunteer_history, now),
        education=compute_education_metrics(profile.education_details),
    )
    logger.debug(
        "Derived metrics: %.2fy worked (%.2fy police-related), %.0fh volunteered, education=%s",
        metrics.work.total_years_worked,
        metrics.work.police_related_years,
        metrics.volunteer.total_volunteer_hours,
        metrics.education.highest_credential_rank,
    )
    return metrics
