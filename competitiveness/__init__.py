"""Competitiveness evaluation for police-recruit candidate profiles."""

from competitiveness.services.readiness import evaluate_profile, evaluate_qualitative
from competitiveness.services.rule_evaluator import evaluate_competitiveness
from competitiveness.services.ruleset_loader import RulesetError, default_ruleset, load_ruleset
from competitiveness.services.tier_classifier import derive_attributes

__version__ = "0.1.0"

__all__ = [
    "RulesetError",
    "default_ruleset",
    "derive_attributes",
    "evaluate_competitiveness",
    "evaluate_profile",
    "evaluate_qualitative",
    "load_ruleset",
]
