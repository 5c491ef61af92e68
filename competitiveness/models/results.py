"""Numeric evaluation output consumed by the UI and reporting layers.

Fields serialize to the camelCase contract (``rawPoints``, ``disqualifierId``)
with ``model_dump(by_alias=True)``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from competitiveness.models.ruleset import CategoryKey
from competitiveness.models.tiers import QualitativeResult


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class EvaluationDetail(_Result):
    """Per-category points. ``capped_points`` never exceeds ``category_max``."""
    category: CategoryKey
    raw_points: float = 0.0
    capped_points: float = 0.0
    category_max: float = 0.0  # the category's configured weight
    matched_rules: list[str] = []  # "<rule_id>:<points>", positive contributions only

    @property
    def matched_rule_ids(self) -> set[str]:
        return {entry.split(":", 1)[0] for entry in self.matched_rules}

    @property
    def percent(self) -> float:
        if self.category_max <= 0:
            return 0.0
        return self.capped_points / self.category_max * 100


class EvaluationResult(_Result):
    total: float = 0.0  # sum of capped points, 0..100 with the default weights
    level: str = ""
    details: list[EvaluationDetail] = []
    disqualified: bool = False
    disqualifier_id: str | None = None
    flags: list[str] = []  # non-level disqualifier actions that fired

    def detail(self, category: CategoryKey) -> EvaluationDetail | None:
        for d in self.details:
            if d.category == category:
                return d
        return None


class CategoryStage(_Result):
    category: CategoryKey
    display_name: str = ""
    stage: str = ""
    label: str = ""  # display label for the stage
    tone: str = ""  # badge tone, e.g. "positive"
    hint: str = ""  # "empty" or "improve" guidance from the ruleset


class ReadinessReport(_Result):
    """Numeric result, per-category stages and qualitative tiers from one profile."""
    evaluation: EvaluationResult
    stages: list[CategoryStage] = []
    qualitative: QualitativeResult = QualitativeResult()
    level_label: str = ""
    level_tone: str = ""
