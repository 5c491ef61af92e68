"""Derived metrics: aggregate measures recomputed on every evaluation."""

from pydantic import BaseModel, ConfigDict


class WorkMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_months_worked: float = 0.0  # legacy month counts may be fractional
    total_years_worked: float = 0.0
    police_related_months: float = 0.0
    police_related_years: float = 0.0
    full_time_months: float = 0.0
    full_time_years: float = 0.0
    total_work_hours: float = 0.0  # only entries that report hours_per_week


class VolunteerMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_volunteer_hours: float = 0.0
    avg_volunteer_hours_per_year: float = 0.0
    last_12_months_volunteer_hours: float = 0.0
    commitment_months: int = 1  # earliest start to latest end, minimum 1


class EducationMetrics(BaseModel):
    """Highest credential across all education entries.

    ``highest_credential_label`` is the credential as the candidate wrote it;
    ``highest_credential_rank`` is the canonical rank-table label.
    """
    model_config = ConfigDict(frozen=True)

    highest_credential_label: str = "Unknown"
    highest_credential_rank: str = "Unknown"
    highest_credential_score: int = 0  # 0..7


class ResumeMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    work: WorkMetrics = WorkMetrics()
    volunteer: VolunteerMetrics = VolunteerMetrics()
    education: EducationMetrics = EducationMetrics()
