"""Learning recommendations for missing skills.

Each missing skill gets a priority (category weight, requirement-ness,
confidence), an hours-to-learn estimate adjusted for the user's experience and
related skills, a short list of resources from the static resource table and
the prerequisites the user still lacks.
"""

import logging
import math
from pathlib import Path
from typing import Iterable

import yaml
from pydantic import ValidationError

from skillgap.config import Settings, settings as default_settings
from skillgap.errors import TaxonomyDataError
from skillgap.models.analysis import LearningResource, Priority, Recommendation
from skillgap.models.profile import UserProfile
from skillgap.models.skills import ExtractedSkill, SkillCategory
from skillgap.services.base import BaseDataService
from skillgap.services.gap_analyzer import CATEGORY_WEIGHTS
from skillgap.services.text_normalizer import normalize_skill_name

logger = logging.getLogger(__name__)

BASE_HOURS: dict[SkillCategory, float] = {
    SkillCategory.TECHNICAL: 80,
    SkillCategory.FRAMEWORKS: 60,
    SkillCategory.TOOLS: 30,
    SkillCategory.METHODOLOGIES: 20,
    SkillCategory.SOFT_SKILLS: 50,
    SkillCategory.CERTIFICATIONS: 100,
    SkillCategory.LANGUAGES: 200,
}

# Lower bound of each priority band, checked highest first
PRIORITY_THRESHOLDS: list[tuple[float, Priority]] = [
    (80, Priority.CRITICAL),
    (60, Priority.HIGH),
    (40, Priority.MEDIUM),
]

_CORE_CATEGORIES = {SkillCategory.TECHNICAL, SkillCategory.FRAMEWORKS}

SENIOR_YEARS = 5
SENIOR_MULTIPLIER = 0.8
JUNIOR_MULTIPLIER = 1.2
MAX_DURATION_WEEKS = 4


def priority_score(skill: ExtractedSkill) -> float:
    score = 40 * CATEGORY_WEIGHTS[skill.category]
    if skill.is_required:
        score += 30
    score += 20 * skill.confidence
    if skill.category in _CORE_CATEGORIES:
        score += 10
    return score


def priority_for(score: float) -> Priority:
    for threshold, priority in PRIORITY_THRESHOLDS:
        if score >= threshold:
            return priority
    return Priority.LOW


def estimate_hours(skill: ExtractedSkill, profile: UserProfile) -> int:
    """Hours to learn a skill, rounded half-up and never below 1."""
    hours = BASE_HOURS[skill.category]
    if profile.experience.total_years > SENIOR_YEARS:
        hours *= SENIOR_MULTIPLIER
    else:
        hours *= JUNIOR_MULTIPLIER

    related = sum(1 for s in profile.skills if s.category == skill.category)
    hours *= max(0.5, 1 - 0.1 * related)
    return max(1, math.floor(hours + 0.5))


class RecommendationEngine(BaseDataService):
    service_name = "learning_resources"

    def __init__(self, path: str | Path | None = None, config: Settings | None = None) -> None:
        self._config = config or default_settings
        self._path = Path(path or self._config.resources_path)
        self._loaded = False
        self._resources: dict[str, list[LearningResource]] = {}
        self._prerequisites: dict[str, list[str]] = {}

    @classmethod
    def from_tables(
        cls,
        resources: dict[str, list[LearningResource]],
        prerequisites: dict[str, list[str]] | None = None,
        config: Settings | None = None,
    ) -> "RecommendationEngine":
        engine = cls(config=config)
        engine._install(resources, prerequisites or {})
        return engine

    def load(self) -> None:
        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise TaxonomyDataError(f"Cannot read resource table {self._path}: {e}") from e

        resources: dict[str, list[LearningResource]] = {}
        for skill, entries in (raw.get("resources") or {}).items():
            try:
                resources[skill] = [LearningResource.model_validate(e) for e in entries or []]
            except ValidationError as e:
                raise TaxonomyDataError(f"Invalid resource for {skill!r} in {self._path}: {e}") from e

        prerequisites = raw.get("prerequisites") or {}
        if not all(isinstance(v, list) for v in prerequisites.values()):
            raise TaxonomyDataError(f"Prerequisites in {self._path} must map skills to lists")

        self._install(resources, prerequisites)
        logger.info(
            "Resource table loaded: %d skills with resources, %d prerequisite entries",
            len(self._resources), len(self._prerequisites),
        )

    def _install(self, resources: dict[str, list[LearningResource]], prerequisites: dict[str, list[str]]) -> None:
        self._resources = {normalize_skill_name(k): list(v) for k, v in resources.items()}
        self._prerequisites = {
            normalize_skill_name(k): [str(p).lower() for p in v] for k, v in prerequisites.items()
        }
        self._loaded = True

    # ------------------------------------------------------------------
    # Per-skill pieces
    # ------------------------------------------------------------------

    def _table_resources(self, skill: ExtractedSkill) -> list[LearningResource]:
        for name in (skill.name, *skill.synonyms):
            found = self._resources.get(normalize_skill_name(name))
            if found:
                return found
        return []

    def select_resources(self, skill: ExtractedSkill, profile: UserProfile) -> list[LearningResource]:
        """Unique resources that fit the user's weekly commitment, best first."""
        self.ensure_loaded()
        unique: dict[str, LearningResource] = {}
        for resource in self._table_resources(skill):
            unique.setdefault(resource.url, resource)

        commitment = profile.preferences.time_commitment
        candidates = list(unique.values())
        if commitment > 0:
            limit = MAX_DURATION_WEEKS * commitment
            candidates = [r for r in candidates if r.duration is None or r.duration <= limit]

        candidates.sort(key=lambda r: (not r.is_free, -(r.rating or 0.0), r.difficulty.rank))
        return candidates[: self._config.max_resources_per_skill]

    def missing_prerequisites(self, skill: ExtractedSkill, profile: UserProfile) -> list[str] | None:
        self.ensure_loaded()
        table = self._prerequisites.get(normalize_skill_name(skill.name))
        if not table:
            return None
        known = profile.skill_names()
        missing = [p for p in table if p not in known]
        return missing or None

    def build(self, skill: ExtractedSkill, profile: UserProfile) -> Recommendation:
        return Recommendation(
            skill=skill,
            priority=priority_for(priority_score(skill)),
            estimated_hours=estimate_hours(skill, profile),
            resources=self.select_resources(skill, profile),
            prerequisites=self.missing_prerequisites(skill, profile),
        )

    def recommend(self, missing: Iterable[ExtractedSkill], profile: UserProfile) -> list[Recommendation]:
        """Recommendations ordered by priority, category weight, then fewest hours."""
        self.ensure_loaded()
        recommendations = [self.build(skill, profile) for skill in missing]
        recommendations.sort(
            key=lambda r: (
                -r.priority.rank,
                -CATEGORY_WEIGHTS[r.skill.category],
                r.estimated_hours,
            )
        )
        logger.debug("Built %d recommendations", len(recommendations))
        return recommendations
