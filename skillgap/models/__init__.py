"""Pydantic contracts shared by the extraction, matching and recommendation stages."""

from skillgap.models.analysis import (
    CacheEntry,
    DifficultyLevel,
    GapAnalysisResult,
    LearningResource,
    Priority,
    Recommendation,
    ResourceType,
    SkillMatch,
)
from skillgap.models.job import AnalysisProgress, AnalysisStage, JobText
from skillgap.models.profile import (
    ExperienceLevel,
    ExperienceLevelType,
    LearningStyle,
    ProficiencyLevel,
    UserPreferences,
    UserProfile,
    UserSkill,
)
from skillgap.models.skills import ExtractedSkill, SkillCategory, SkillDefinition
from skillgap.models.trends import (
    JobComparison,
    KeywordSuggestion,
    OptimizationType,
    ResumeSuggestion,
    SkillFrequency,
    SkillTrend,
    TrendDirection,
)

__all__ = [
    "AnalysisProgress",
    "AnalysisStage",
    "CacheEntry",
    "DifficultyLevel",
    "ExperienceLevel",
    "ExperienceLevelType",
    "ExtractedSkill",
    "GapAnalysisResult",
    "JobComparison",
    "JobText",
    "KeywordSuggestion",
    "LearningResource",
    "LearningStyle",
    "OptimizationType",
    "Priority",
    "ProficiencyLevel",
    "Recommendation",
    "ResourceType",
    "ResumeSuggestion",
    "SkillCategory",
    "SkillDefinition",
    "SkillFrequency",
    "SkillMatch",
    "SkillTrend",
    "TrendDirection",
    "UserPreferences",
    "UserProfile",
    "UserSkill",
]
