"""Qualitative tier vocabulary, classifier attributes and results.

The qualitative classifier works from per-category attribute records rather
than from weighted rules. Attributes are usually derived from a raw profile
(``tier_classifier.derive_attributes``) but callers may build them directly.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Tier(str, Enum):
    EXCEPTIONAL = "Exceptional"
    COMPETITIVE = "Competitive"
    DEVELOPING = "Developing"
    NEEDS_IMPROVEMENT = "Needs Improvement"
    UNKNOWN = "Unknown"


class QualitativeCategory(str, Enum):
    EDUCATION = "education"
    WORK = "work"
    VOLUNTEER = "volunteer"
    CERTS_SKILLS = "certs_skills"
    REFERENCES = "references"
    CONDUCT = "conduct"


class _Attrs(BaseModel):
    model_config = ConfigDict(frozen=True)


class EducationAttributes(_Attrs):
    level: str = ""  # Postgrad | University Degree | College Diploma | High School | raw text
    field_relevant: bool = False
    cont_ed_recent: bool = False


class WorkAttributes(_Attrs):
    fulltime_years: float = 0
    relevant_months: float = 0
    public_facing: bool = False
    continuity_ok: bool = False
    leadership: bool = False
    shift_exposure: bool = False
    frontline_public_safety_12m: bool = False


class VolunteerAttributes(_Attrs):
    hours_lifetime: float = 0
    hours_12mo: float = 0
    consistency_6mo: bool = False
    role_type: str = ""
    lead_role: bool = False


class CertAttributes(_Attrs):
    cpr_c_current: bool = False
    mhfa: bool = False
    cpi_nvci: bool = False
    asist: bool = False
    naloxone_trained: bool = False
    deescalation_advanced: bool = False
    cpr_valid_6mo: bool = False


class SkillAttributes(_Attrs):
    language_second: bool = False
    priority_language: bool = False


class DriverAttributes(_Attrs):
    licence_class: str = ""
    clean_abstract: bool = False


class FitnessAttributes(_Attrs):
    prep_digital_attempted: bool = False
    pin_digital_attempts_3: bool = False


class ReferenceAttributes(_Attrs):
    count: int = 0
    diverse_contexts: bool = False
    confirmed_recent: bool = False
    supervisor_within_12mo: bool = False
    no_family: bool = False
    contactable_verified: bool = False


class ConductAttributes(_Attrs):
    no_major_issues: bool = False
    clean_driving_24mo: bool = False
    social_media_ack: bool = False


class TierAttributes(_Attrs):
    education: EducationAttributes = EducationAttributes()
    work: WorkAttributes = WorkAttributes()
    volunteer: VolunteerAttributes = VolunteerAttributes()
    certs: CertAttributes = CertAttributes()
    skills: SkillAttributes = SkillAttributes()
    driver: DriverAttributes = DriverAttributes()
    fitness: FitnessAttributes = FitnessAttributes()
    refs: ReferenceAttributes = ReferenceAttributes()
    conduct: ConductAttributes = ConductAttributes()
    # Raw history presence counts as "information supplied"
    has_work_history: bool = False
    has_volunteer_history: bool = False
    has_refs_list: bool = False


class TierSignals(_Attrs):
    """Inputs to the tier rule: one strong anchor plus secondary signals."""
    anchor_met: bool = False
    supporting_met: int = 0
    info_present: bool = False


class WeightedTier(_Attrs):
    tier: Tier
    score: int  # normalized weighted score, 0..100


class QualitativeResult(_Attrs):
    tiers: dict[QualitativeCategory, Tier] = {}
    summaries: dict[QualitativeCategory, str] = {}
    overall: Tier = Tier.UNKNOWN  # majority vote
    weighted: WeightedTier = WeightedTier(tier=Tier.NEEDS_IMPROVEMENT, score=0)
