"""Configuration entities: categories, rules, thresholds and disqualifiers.

A ``CompetitivenessConfig`` is static, versioned data. Instances are frozen;
alternate policies (another jurisdiction, a new version) are separate
instances, usually separate YAML files.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class CategoryKey(str, Enum):
    EDUCATION = "education"
    WORK = "work"
    VOLUNTEER = "volunteer"
    CERTS = "certs"
    FITNESS = "fitness"
    DRIVING = "driving"
    BACKGROUND = "background"
    SOFTSKILLS = "softskills"
    REFERENCES = "references"


class StageLevel(str, Enum):
    """Section badge stages, declared lowest to highest."""
    NEEDS_WORK = "NEEDS_WORK"
    DEVELOPING = "DEVELOPING"
    EFFECTIVE = "EFFECTIVE"
    COMPETITIVE = "COMPETITIVE"


STAGE_ORDER: tuple[str, ...] = tuple(level.value for level in StageLevel)

NOT_ELIGIBLE = "Not Eligible"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Rule(_Frozen):
    id: str
    points: float
    repeatable: bool = False
    cap: float | None = None  # clamp for repeatable contributions
    # Informational tag for bonus rules. Scoring never reads it: every
    # category total is already clamped to the category weight.
    cap_category: bool = False


class SummaryHints(_Frozen):
    empty: str = ""
    improve: str = ""


class CategoryConfig(_Frozen):
    weight: float  # also the category's maximum points
    rules: tuple[Rule, ...] = ()
    display_name: str = ""
    summary_hints: SummaryHints = SummaryHints()

    @field_validator("weight")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("category weight must be non-negative")
        return value

    @field_validator("rules")
    @classmethod
    def _unique_ids(cls, rules: tuple[Rule, ...]) -> tuple[Rule, ...]:
        seen: set[str] = set()
        for rule in rules:
            if rule.id in seen:
                raise ValueError(f"duplicate rule id: {rule.id}")
            seen.add(rule.id)
        return rules


class LevelThreshold(_Frozen):
    level: str
    min: float


def _descending(thresholds: tuple[LevelThreshold, ...]) -> tuple[LevelThreshold, ...]:
    return tuple(sorted(thresholds, key=lambda t: t.min, reverse=True))


class DisqualifierEffect(_Frozen):
    level: str | None = None  # force the overall level
    action: str | None = None  # e.g. "set_driving_zero_and_flag"

    @model_validator(mode="after")
    def _exactly_one(self) -> "DisqualifierEffect":
        if (self.level is None) == (self.action is None):
            raise ValueError("disqualifier effect needs exactly one of 'level' or 'action'")
        return self


class Disqualifier(_Frozen):
    id: str
    effect: DisqualifierEffect


class AnchorLift(_Frozen):
    """Raise a section stage to ``target`` when the matched rules qualify."""
    target: StageLevel
    any_of: tuple[str, ...] = ()
    all_of: tuple[str, ...] = ()

    def applies(self, matched_ids: set[str]) -> bool:
        if self.all_of and not set(self.all_of) <= matched_ids:
            return False
        if self.any_of and not matched_ids.intersection(self.any_of):
            return False
        return bool(self.any_of or self.all_of)


class RelevanceMap(_Frozen):
    education_relevant_fields: tuple[str, ...] = ()
    work_relevant_tags: tuple[str, ...] = ()
    volunteer_focus_areas: tuple[str, ...] = ()


class DisplayTokens(_Frozen):
    level_labels: dict[str, str] = {}
    level_tones: dict[str, str] = {}
    category_order: tuple[CategoryKey, ...] = tuple(CategoryKey)


class TierThresholds(_Frozen):
    """Anchor thresholds for the qualitative tier classifier."""
    work_fulltime_years_min: float = 2
    work_relevant_months_min: float = 12
    volunteer_hours_lifetime_min: float = 150
    volunteer_hours_12mo_min: float = 75
    education_anchor_levels: tuple[str, ...] = ("College Diploma", "University Degree", "Postgrad")


class QualitativeConfig(_Frozen):
    thresholds: TierThresholds = TierThresholds()
    weights: dict[str, float] = {
        "education": 0.25,
        "work": 0.30,
        "volunteer": 0.20,
        "certs_skills": 0.15,
        "references": 0.10,
    }


class CompetitivenessConfig(_Frozen):
    version: str = ""
    categories: dict[CategoryKey, CategoryConfig]
    thresholds: tuple[LevelThreshold, ...]
    disqualifiers: tuple[Disqualifier, ...] = ()
    category_stages: dict[CategoryKey, tuple[LevelThreshold, ...]] = {}
    anchor_lifts: dict[CategoryKey, tuple[AnchorLift, ...]] = {}
    relevance: RelevanceMap = RelevanceMap()
    display: DisplayTokens = DisplayTokens()
    qualitative: QualitativeConfig = QualitativeConfig()

    @field_validator("thresholds")
    @classmethod
    def _sort_thresholds(cls, value: tuple[LevelThreshold, ...]) -> tuple[LevelThreshold, ...]:
        if not value:
            raise ValueError("at least one level threshold is required")
        return _descending(value)

    @field_validator("category_stages")
    @classmethod
    def _sort_stages(
        cls, value: dict[CategoryKey, tuple[LevelThreshold, ...]]
    ) -> dict[CategoryKey, tuple[LevelThreshold, ...]]:
        return {key: _descending(stages) for key, stages in value.items() if stages}

    @property
    def total_weight(self) -> float:
        return sum(c.weight for c in self.categories.values())

    @property
    def lowest_level(self) -> str:
        return self.thresholds[-1].level

    def weight(self, category: CategoryKey) -> float:
        cat = self.categories.get(category)
        return cat.weight if cat else 0.0

    def rules(self, category: CategoryKey) -> tuple[Rule, ...]:
        cat = self.categories.get(category)
        return cat.rules if cat else ()

    def stages_for(self, category: CategoryKey) -> tuple[LevelThreshold, ...]:
        """Per-category stage table, falling back to the global thresholds."""
        return self.category_stages.get(category) or self.thresholds

    def ordered_categories(self) -> list[CategoryKey]:
        """Configured categories in display order; unlisted ones go last."""
        order = [c for c in self.display.category_order if c in self.categories]
        return order + [c for c in self.categories if c not in order]
