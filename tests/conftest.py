"""Shared test configuration, fixtures and pytest markers."""

from datetime import date

import pytest

from competitiveness.services.ruleset_loader import load_ruleset

# Fixed clock so month arithmetic is reproducible
NOW = date(2025, 6, 15)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "scenario: end-to-end evaluation of a complete profile"
    )


@pytest.fixture(scope="session")
def ruleset():
    return load_ruleset()


@pytest.fixture
def now():
    return NOW


def make_strong_profile(**overrides) -> dict:
    """A complete, high-scoring profile; keyword overrides replace top-level keys."""
    profile = {
        "work_history": [
            {
                "employer": "Metro Security",
                "role": "Security Guard",
                "start_date": "2021-01",
                "current": True,
                "hours_per_week": 40,
                "leadership": True,
                "police_relevant": ["customer-facing", "shift work"],
            }
        ],
        "education_details": [
            {
                "institution": "York University",
                "credential_level": "Bachelor's Degree",
                "program": "Criminology",
                "end_date": "2020-05",
            }
        ],
        "volunteer_history": [
            {
                "org": "Youth Club",
                "role_type": "youth",
                "start_date": "2023-01",
                "current": True,
                "hours_per_week": 3,
                "lead_role": True,
            }
        ],
        "certs_details": [
            {"name": "CPR-C & First Aid", "issue_date": "2025-01-10"},
            {"name": "Mental Health First Aid"},
            {"name": "CPI Nonviolent Crisis Intervention"},
        ],
        "refs_list": [
            {"name": "A. Supervisor", "context": "work", "known_2y": True},
            {"name": "B. Coach", "context": "volunteer", "known_2y": True},
            {"name": "C. Professor", "context": "school"},
        ],
        "skills_languages": [{"language": "French", "proficiency": "Professional working"}],
        "skills_details": ["Conflict resolution", "Report writing"],
        "driver_licence_class": "G",
        "driver_clean_abstract": True,
        "conduct_no_major_issues": True,
        "social_media_ack": True,
        "fitness_prep_observed_verified": True,
    }
    profile.update(overrides)
    return profile


@pytest.fixture
def strong_profile():
    return make_strong_profile()
