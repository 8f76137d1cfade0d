"""Resume optimization: keyword suggestions and improvement recommendations.

Works over the analysis history: skills that keep showing up in saved jobs
are ranked against the user's profile, and the ranking drives the
ResumeSuggestion list (missing keywords, skills to emphasize, trending
skills, certifications, soft skills).
"""

import logging
from pathlib import Path
from typing import Sequence

import yaml

from skillgap.config import Settings, settings as default_settings
from skillgap.errors import TaxonomyDataError
from skillgap.models.analysis import GapAnalysisResult, Priority
from skillgap.models.profile import UserProfile
from skillgap.models.skills import ExtractedSkill, SkillCategory
from skillgap.models.trends import (
    KeywordSuggestion,
    OptimizationType,
    ResumeSuggestion,
    TrendDirection,
)
from skillgap.services.base import BaseDataService
from skillgap.services.text_normalizer import normalize_skill_name
from skillgap.services.trend_analyzer import TrendAnalyzer

logger = logging.getLogger(__name__)

MAX_CONTEXT_EXAMPLES = 3
MAX_MISSING_KEYWORDS = 5
MAX_LISTED = 3
KEYWORD_IMPACT_PER_SKILL = 15


class KeywordOptimizer(BaseDataService):
    service_name = "keyword_tables"

    def __init__(
        self,
        path: str | Path | None = None,
        trend_analyzer: TrendAnalyzer | None = None,
        config: Settings | None = None,
    ) -> None:
        self._config = config or default_settings
        self._path = Path(path or self._config.keyword_tables_path)
        self._trends = trend_analyzer or TrendAnalyzer()
        self._loaded = False
        self._certifications: dict[str, str] = {}
        self._soft_skills: set[str] = set()

    def load(self) -> None:
        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise TaxonomyDataError(f"Cannot read keyword tables {self._path}: {e}") from e

        certifications = raw.get("certifications") or {}
        soft_skills = raw.get("soft_skills") or []
        if not isinstance(certifications, dict) or not isinstance(soft_skills, list):
            raise TaxonomyDataError(f"Malformed keyword tables in {self._path}")

        self._certifications = {normalize_skill_name(k): str(v) for k, v in certifications.items()}
        self._soft_skills = {normalize_skill_name(s) for s in soft_skills}
        logger.info(
            "Keyword tables loaded: %d certifications, %d soft skills",
            len(self._certifications), len(self._soft_skills),
        )

    # ------------------------------------------------------------------
    # Keyword ranking
    # ------------------------------------------------------------------

    def keyword_suggestions(
        self, history: Sequence[GapAnalysisResult], profile: UserProfile
    ) -> list[KeywordSuggestion]:
        """Every skill seen across saved jobs: missing first, then importance, then frequency."""
        first_seen: dict[str, ExtractedSkill] = {}
        confidences: dict[str, list[float]] = {}
        contexts: dict[str, list[str]] = {}
        for result in history:
            for skill in result.job_skills:
                key = skill.name.lower()
                first_seen.setdefault(key, skill)
                confidences.setdefault(key, []).append(skill.confidence)
                if skill.context:
                    contexts.setdefault(key, []).append(skill.context)

        in_profile = profile.skill_names()
        suggestions = [
            KeywordSuggestion(
                keyword=skill.name,
                category=skill.category,
                frequency=len(confidences[key]),
                importance=sum(confidences[key]) / len(confidences[key]),
                currently_in_profile=key in in_profile,
                synonyms=list(skill.synonyms),
                context_examples=contexts.get(key, [])[:MAX_CONTEXT_EXAMPLES],
            )
            for key, skill in first_seen.items()
        ]
        suggestions.sort(key=lambda k: (k.currently_in_profile, -k.importance, -k.frequency))
        return suggestions

    def suggest_certifications(
        self, suggestions: Sequence[KeywordSuggestion], profile: UserProfile
    ) -> list[str]:
        """Certifications for in-demand skills the user already has or has something close to."""
        self.ensure_loaded()
        user_names = [s.name.lower() for s in profile.skills]
        picked: list[str] = []
        for suggestion in suggestions:
            if suggestion.importance <= 0.6 or suggestion.frequency < 2:
                continue
            name = normalize_skill_name(suggestion.keyword)
            certification = self._certifications.get(name)
            if certification is None or certification in picked:
                continue
            if any(u in name or name in u for u in user_names):
                picked.append(certification)
        return picked[:MAX_LISTED]

    def suggest_soft_skills(self, suggestions: Sequence[KeywordSuggestion]) -> list[str]:
        self.ensure_loaded()
        picked = [
            s.keyword
            for s in suggestions
            if (s.category == SkillCategory.SOFT_SKILLS or normalize_skill_name(s.keyword) in self._soft_skills)
            and not s.currently_in_profile
            and s.importance > 0.5
            and s.frequency >= 2
        ]
        return picked[:MAX_LISTED]

    # ------------------------------------------------------------------
    # Resume suggestions
    # ------------------------------------------------------------------

    def optimization_suggestions(
        self, history: Sequence[GapAnalysisResult], profile: UserProfile
    ) -> list[ResumeSuggestion]:
        self.ensure_loaded()
        keywords = self.keyword_suggestions(history, profile)
        suggestions: list[ResumeSuggestion] = []

        missing = [k for k in keywords if not k.currently_in_profile and k.importance > 0.6]
        missing = missing[:MAX_MISSING_KEYWORDS]
        if missing:
            names = [k.keyword for k in missing]
            examples = [e for k in missing for e in k.context_examples]
            suggestions.append(ResumeSuggestion(
                type=OptimizationType.KEYWORD_ADDITION,
                priority=Priority.HIGH,
                title="Add Missing High-Impact Keywords",
                description=f"Add these frequently requested skills to your resume: {', '.join(names)}",
                keywords=names,
                examples=examples[:MAX_CONTEXT_EXAMPLES],
                impact=f"Could improve job matching by {len(missing) * KEYWORD_IMPACT_PER_SKILL}%",
            ))

        emphasized = [
            k.keyword for k in keywords
            if k.currently_in_profile and k.importance > 0.7 and k.frequency >= 3
        ][:MAX_LISTED]
        if emphasized:
            suggestions.append(ResumeSuggestion(
                type=OptimizationType.SKILL_EMPHASIS,
                priority=Priority.MEDIUM,
                title="Emphasize Existing Skills",
                description=f"Highlight these skills more prominently: {', '.join(emphasized)}",
                keywords=emphasized,
                impact="Better alignment with job requirements",
            ))

        trending = [
            t.skill_name for t in self._trends.trends(history)
            if t.trend_direction == TrendDirection.INCREASING and t.frequency >= 3
        ][:MAX_LISTED]
        if trending:
            suggestions.append(ResumeSuggestion(
                type=OptimizationType.SKILL_EMPHASIS,
                priority=Priority.MEDIUM,
                title="Focus on Trending Skills",
                description=f"These skills are increasingly in demand: {', '.join(trending)}",
                keywords=trending,
                impact="Stay ahead of market trends",
            ))

        certifications = self.suggest_certifications(keywords, profile)
        if certifications:
            suggestions.append(ResumeSuggestion(
                type=OptimizationType.CERTIFICATION_SUGGESTION,
                priority=Priority.LOW,
                title="Consider Relevant Certifications",
                description=f"These certifications could strengthen your profile: {', '.join(certifications)}",
                keywords=certifications,
                impact="Demonstrate expertise and commitment",
            ))

        soft_skills = self.suggest_soft_skills(keywords)
        if soft_skills:
            suggestions.append(ResumeSuggestion(
                type=OptimizationType.SOFT_SKILL_ADDITION,
                priority=Priority.MEDIUM,
                title="Add Important Soft Skills",
                description=f"Include these soft skills: {', '.join(soft_skills)}",
                keywords=soft_skills,
                impact="Better match for leadership and team roles",
            ))

        suggestions.sort(key=lambda s: -s.priority.rank)
        logger.debug("Built %d resume suggestions from %d keywords", len(suggestions), len(keywords))
        return suggestions
