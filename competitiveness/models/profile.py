"""Raw candidate profile: the optional-field schema for every history entry.

Profiles arrive as loosely-typed JSON from the profile store. Every field is
optional and every validator degrades malformed values to "no data" instead
of raising, so ``ProfileData.from_raw()`` accepts any dict.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

from competitiveness.services.date_utils import number_from_unknown


def _text_or_none(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _strict_flag(value: Any) -> bool | None:
    # Tri-state: only real booleans count, anything else is "not supplied"
    return value if isinstance(value, bool) else None


def _loose_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _whole_number(value: Any) -> int | None:
    number = number_from_unknown(value)
    return int(number) if number is not None else None


def _string_keys(value: dict) -> dict:
    # JSON objects only have string keys; anything else is not profile data
    return {k: v for k, v in value.items() if isinstance(k, str)}


def _dict_items(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [_string_keys(item) for item in value if isinstance(item, dict)]


def _string_items(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _any_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


Text = Annotated[str | None, BeforeValidator(_text_or_none)]
Number = Annotated[float | None, BeforeValidator(number_from_unknown)]
Year = Annotated[int | None, BeforeValidator(_whole_number)]
Flag = Annotated[bool, BeforeValidator(_loose_flag)]
TriState = Annotated[bool | None, BeforeValidator(_strict_flag)]
Tags = Annotated[list[str], BeforeValidator(_string_items)]


class _Entry(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)


class WorkEntry(_Entry):
    """A single job. Legacy ``start``/``end``/``months`` keys are still honoured."""
    employer: Text = None
    title: Text = None
    role: Text = None
    custom_role: Text = None
    start: Text = None  # legacy YYYY-MM
    end: Text = None  # legacy YYYY-MM
    start_date: Text = None
    end_date: Text = None
    current: Flag = False
    months: Number = None  # legacy precomputed span
    hours_per_week: Number = None
    leadership: Flag = False
    police_relevant: Tags = []  # relevance tags, e.g. "customer-facing", "shift work"

    @property
    def start_ym(self) -> str | None:
        return self.start_date or self.start

    @property
    def end_ym(self) -> str | None:
        return self.end_date or self.end

    @property
    def role_label(self) -> str:
        """Curated role picked from the role list, used for police-relevance."""
        return (self.role or self.custom_role or "").strip()

    @property
    def job_title(self) -> str:
        return self.role or self.title or ""


class VolunteerEntry(_Entry):
    org: Text = None
    organization: Text = None  # legacy
    role: Text = None
    date: Text = None  # legacy single-month entry
    start_date: Text = None
    end_date: Text = None
    current: Flag = False
    hours: Number = None  # legacy total
    hours_per_week: Number = None
    total_hours: Number = None
    lead_role: Flag = False
    role_type: Text = None  # youth | seniors | vulnerable | coaching | community_safety

    @property
    def start_ym(self) -> str | None:
        return self.start_date or self.date

    @property
    def explicit_total_hours(self) -> float | None:
        return self.total_hours if self.total_hours is not None else self.hours


class EducationEntry(_Entry):
    institution: Text = None
    credential_level: Text = None
    level: Text = None  # legacy
    program: Text = None
    field_of_study: Text = None
    end_date: Text = None  # YYYY-MM
    year: Year = None  # legacy graduation year

    @property
    def credential_text(self) -> str:
        return (self.credential_level or self.level or "").strip()

    @property
    def program_text(self) -> str:
        return self.program or self.field_of_study or ""


class CertEntry(_Entry):
    name: Text = None
    type: Text = None  # tag: cpr_c | mhfa | cpi_nvci | naloxone
    issue_date: Text = None  # YYYY-MM-DD or YYYY-MM


class ReferenceEntry(_Entry):
    name: Text = None
    relationship: Text = None
    context: Text = None  # work | volunteer | school | community
    phone: Text = None
    email: Text = None
    known_2y: Flag = False
    diverse_context: Flag = False


class LanguageEntry(_Entry):
    language: Text = None
    proficiency: Text = None


class ProfileData(BaseModel):
    """Everything the engine reads from an application profile."""
    model_config = ConfigDict(extra="allow", frozen=True)

    work_history: Annotated[list[WorkEntry], BeforeValidator(_dict_items)] = []
    volunteer_history: Annotated[list[VolunteerEntry], BeforeValidator(_dict_items)] = []
    education_details: Annotated[list[EducationEntry], BeforeValidator(_dict_items)] = []
    certs_details: Annotated[list[CertEntry], BeforeValidator(_dict_items)] = []
    refs_list: Annotated[list[ReferenceEntry], BeforeValidator(_dict_items)] = []
    skills_languages: Annotated[list[LanguageEntry], BeforeValidator(_dict_items)] = []
    skills_details: Annotated[list[Any], BeforeValidator(_any_list)] = []

    driver_licence_class: Text = None
    driver_clean_abstract: TriState = None
    driving_recent_major_offence: TriState = None
    conduct_no_major_issues: TriState = None
    integrity_dishonesty: TriState = None
    social_media_ack: TriState = None
    fitness_prep_observed_verified: TriState = None
    fitness_prep_digital_attempted: TriState = None
    # Set by the verification layer, never self-reported
    transcript_verified: TriState = None
    employment_letter_verified: TriState = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ProfileData":
        """Build a profile from untrusted JSON-shaped input."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, dict):
            return cls()
        return cls.model_validate(_string_keys(raw))

    @property
    def has_leadership(self) -> bool:
        return any(w.leadership for w in self.work_history) or any(
            v.lead_role for v in self.volunteer_history
        )
