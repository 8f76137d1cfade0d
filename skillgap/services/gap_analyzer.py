"""Gap analysis: pair job skills with the user's inventory and score the fit.

Matching order per job skill: exact name, then synonyms (the user's and the
job skill's), then fuzzy similarity. Fuzzy matching never overrides an exact
or synonym hit. Profile skill order is canonical: when two profile skills
claim the same key, the earlier one keeps it.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Iterable

from skillgap.models.analysis import GapAnalysisResult, SkillMatch
from skillgap.models.profile import ProficiencyLevel, UserProfile, UserSkill
from skillgap.models.skills import ExtractedSkill, SkillCategory
from skillgap.services.fuzzy_matcher import FuzzyMatcher

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS: dict[SkillCategory, float] = {
    SkillCategory.TECHNICAL: 1.0,
    SkillCategory.FRAMEWORKS: 0.9,
    SkillCategory.CERTIFICATIONS: 0.9,
    SkillCategory.TOOLS: 0.8,
    SkillCategory.METHODOLOGIES: 0.7,
    SkillCategory.LANGUAGES: 0.6,
    SkillCategory.SOFT_SKILLS: 0.5,
}

PROFICIENCY_SCORES: dict[ProficiencyLevel, float] = {
    ProficiencyLevel.BEGINNER: 0.25,
    ProficiencyLevel.INTERMEDIATE: 0.5,
    ProficiencyLevel.ADVANCED: 0.75,
    ProficiencyLevel.EXPERT: 1.0,
}

# Context clues for the proficiency a posting expects. First match wins.
_REQUIRED_LEVELS: list[tuple[re.Pattern, float]] = [
    (re.compile(r"expert|senior|lead|architect|principal"), 0.9),
    (re.compile(r"advanced|proficient|strong|extensive"), 0.75),
    (re.compile(r"experience|familiar|knowledge"), 0.5),
    (re.compile(r"basic|entry|junior|beginner"), 0.25),
]
DEFAULT_REQUIRED_LEVEL = 0.5
GAP_PENALTY = 0.3
REQUIRED_BOOST = 1.1
REQUIRED_WEIGHT = 1.5
MISSING_PENALTY = 0.1


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def estimate_required_proficiency(job_skill: ExtractedSkill) -> float:
    context = job_skill.context.lower()
    level = DEFAULT_REQUIRED_LEVEL
    for pattern, value in _REQUIRED_LEVELS:
        if pattern.search(context):
            level = value
            break
    if job_skill.is_required:
        level = max(level, DEFAULT_REQUIRED_LEVEL)
    return level


def skill_weight(job_skill: ExtractedSkill) -> float:
    """Weight of a job skill in the overall match."""
    weight = CATEGORY_WEIGHTS[job_skill.category]
    if job_skill.is_required:
        weight *= REQUIRED_WEIGHT
    return weight * job_skill.confidence


def calculate_skill_match(user_skill: UserSkill, job_skill: ExtractedSkill) -> SkillMatch:
    """Score how well one declared skill satisfies one job requirement."""
    user_level = PROFICIENCY_SCORES[user_skill.proficiency]
    gap = max(0.0, estimate_required_proficiency(job_skill) - user_level)

    score = 1.0 - gap * GAP_PENALTY
    score *= job_skill.confidence
    score *= CATEGORY_WEIGHTS[job_skill.category]
    if job_skill.is_required:
        score *= REQUIRED_BOOST

    return SkillMatch(
        user_skill=user_skill,
        job_skill=job_skill,
        match_score=_clamp(score),
        proficiency_gap=gap if gap > 0 else None,
    )


def calculate_overall_match(matches: list[SkillMatch], missing: list[ExtractedSkill]) -> float:
    """Weighted mean match score minus 0.1 per missing skill, clamped to [0, 1].

    A job with no extracted skills is a vacuous full match (1.0).
    """
    if not matches and not missing:
        return 1.0

    total_weight = 0.0
    weighted = 0.0
    for match in matches:
        weight = skill_weight(match.job_skill)
        weighted += match.match_score * weight
        total_weight += weight

    base = weighted / total_weight if total_weight > 0 else 0.0
    return _clamp(base - MISSING_PENALTY * len(missing))


class GapAnalyzer:
    def __init__(
        self,
        fuzzy: FuzzyMatcher | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._fuzzy = fuzzy or FuzzyMatcher()
        self._clock = clock

    @staticmethod
    def build_skill_index(profile: UserProfile) -> dict[str, UserSkill]:
        """Lowercased name/synonym -> profile skill, first claim wins."""
        index: dict[str, UserSkill] = {}
        for skill in profile.skills:
            index.setdefault(skill.name.lower(), skill)
            for synonym in skill.synonyms:
                index.setdefault(synonym.lower(), skill)
        return index

    def find_user_skill(
        self, job_skill: ExtractedSkill, index: dict[str, UserSkill]
    ) -> UserSkill | None:
        name = job_skill.name.lower()
        if name in index:
            return index[name]

        for synonym in job_skill.synonyms:
            hit = index.get(synonym.lower())
            if hit is not None:
                return hit

        key = self._fuzzy.best_match(name, index.keys())
        if key is not None:
            logger.debug("Fuzzy matched job skill %r to profile key %r", name, key)
            return index[key]
        return None

    def analyze(
        self,
        profile: UserProfile,
        job_skills: Iterable[ExtractedSkill],
        job_id: str,
    ) -> GapAnalysisResult:
        index = self.build_skill_index(profile)
        matches: list[SkillMatch] = []
        missing: list[ExtractedSkill] = []

        for job_skill in job_skills:
            user_skill = self.find_user_skill(job_skill, index)
            if user_skill is None:
                missing.append(job_skill)
            else:
                matches.append(calculate_skill_match(user_skill, job_skill))

        overall = calculate_overall_match(matches, missing)
        logger.info(
            "Gap analysis for job %s: %d matched, %d missing, overall=%.2f",
            job_id, len(matches), len(missing), overall,
        )
        return GapAnalysisResult(
            job_id=job_id,
            user_id=profile.id,
            matches=matches,
            missing=missing,
            overall_match=overall,
            analysis_date=self._clock(),
        )
