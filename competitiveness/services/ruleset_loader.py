"""Load and validate YAML rulesets into frozen ``CompetitivenessConfig`` values."""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from competitiveness.config import settings
from competitiveness.models.ruleset import CompetitivenessConfig
from competitiveness.services.rule_predicates import DISQUALIFIER_PREDICATES, get_predicate

logger = logging.getLogger(__name__)

DEFAULT_RULESET_PATH = Path(__file__).resolve().parent.parent / "data" / "default_ruleset.yaml"

EXPECTED_TOTAL_WEIGHT = 100


class RulesetError(ValueError):
    """A ruleset file could not be read or does not describe a valid config."""


def unknown_rule_ids(config: CompetitivenessConfig) -> list[str]:
    """``category/rule_id`` pairs that no predicate is registered for."""
    return [
        f"{key.value}/{rule.id}"
        for key, category in config.categories.items()
        for rule in category.rules
        if get_predicate(key, rule.id) is None
    ]


def parse_ruleset(data: object, strict: bool | None = None) -> CompetitivenessConfig:
    """Validate an already-parsed mapping (e.g. from YAML or JSON)."""
    if not isinstance(data, dict):
        raise RulesetError("ruleset must be a mapping")
    try:
        config = CompetitivenessConfig.model_validate(data)
    except ValidationError as e:
        raise RulesetError(f"invalid ruleset: {e}") from e

    if config.total_weight != EXPECTED_TOTAL_WEIGHT:
        logger.warning(
            "Category weights sum to %g, not %d; totals will not span 0-100",
            config.total_weight, EXPECTED_TOTAL_WEIGHT,
        )

    unknown = unknown_rule_ids(config)
    if unknown:
        strict = settings.strict_ruleset if strict is None else strict
        if strict:
            raise RulesetError(f"rules without a predicate: {', '.join(unknown)}")
        logger.warning("Rules without a predicate will score 0: %s", ", ".join(unknown))

    for disq in config.disqualifiers:
        if disq.id not in DISQUALIFIER_PREDICATES:
            logger.warning("Disqualifier %s has no predicate and will never fire", disq.id)
    return config


def load_ruleset(path: str | Path | None = None, strict: bool | None = None) -> CompetitivenessConfig:
    """Read a YAML ruleset. ``None`` loads the packaged default."""
    path = Path(path) if path else DEFAULT_RULESET_PATH
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise RulesetError(f"cannot read ruleset {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RulesetError(f"malformed YAML in {path}: {e}") from e

    config = parse_ruleset(data, strict=strict)
    logger.info(
        "Ruleset loaded from %s (version %s, %d categories)",
        path, config.version or "unversioned", len(config.categories),
    )
    return config


@lru_cache(maxsize=1)
def default_ruleset() -> CompetitivenessConfig:
    """The shared read-only ruleset, honouring ``COMPETITIVENESS_RULESET_PATH``."""
    return load_ruleset(settings.ruleset_path or None)
