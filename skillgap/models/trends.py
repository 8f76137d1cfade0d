"""Longitudinal outputs: skill trends, keyword suggestions, job comparisons."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from skillgap.models.analysis import Priority
from skillgap.models.skills import ExtractedSkill, SkillCategory


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class SkillTrend(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_name: str
    category: SkillCategory
    trend_direction: TrendDirection
    frequency: int  # entries in which the skill appears
    average_importance: float  # mean extraction confidence
    job_count: int
    job_ids: list[str] = []


class SkillFrequency(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_name: str
    frequency: int
    average_importance: float
    job_ids: list[str] = []


class JobComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_ids: list[str]
    common_skills: list[ExtractedSkill] = []
    unique_skills: dict[str, list[ExtractedSkill]] = {}  # job_id -> skills only some jobs ask for
    match_scores: dict[str, float] = {}  # job_id -> overall_match
    skill_frequency: list[SkillFrequency] = []


class KeywordSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: str
    category: SkillCategory
    frequency: int  # how many saved jobs mention it
    importance: float  # 0-1, mean confidence across those jobs
    currently_in_profile: bool
    synonyms: list[str] = []
    context_examples: list[str] = []


class OptimizationType(str, Enum):
    KEYWORD_ADDITION = "keyword_addition"
    SKILL_EMPHASIS = "skill_emphasis"
    EXPERIENCE_HIGHLIGHT = "experience_highlight"
    CERTIFICATION_SUGGESTION = "certification_suggestion"
    SOFT_SKILL_ADDITION = "soft_skill_addition"


class ResumeSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: OptimizationType
    priority: Priority
    title: str
    description: str
    keywords: list[str] = []
    examples: list[str] = []
    impact: str = ""  # expected effect on job matching
