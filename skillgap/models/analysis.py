"""Gap analysis output: matches, missing skills, recommendations and cache entries."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from skillgap.models.profile import UserSkill
from skillgap.models.skills import ExtractedSkill


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(Priority).index(self)


class ResourceType(str, Enum):
    COURSE = "course"
    TUTORIAL = "tutorial"
    DOCUMENTATION = "documentation"
    BOOK = "book"
    VIDEO = "video"
    PRACTICE = "practice"
    CERTIFICATION = "certification"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return list(DifficultyLevel).index(self)


class LearningResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    type: ResourceType
    url: str
    provider: str
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    duration: float | None = Field(default=None, ge=0.0)  # hours
    cost: float | None = Field(default=None, ge=0.0)  # USD
    difficulty: DifficultyLevel = DifficultyLevel.INTERMEDIATE

    @property
    def is_free(self) -> bool:
        return not self.cost


class SkillMatch(BaseModel):
    """A user skill paired with the job skill it satisfies."""
    model_config = ConfigDict(frozen=True)

    user_skill: UserSkill
    job_skill: ExtractedSkill
    match_score: float = Field(ge=0.0, le=1.0)
    proficiency_gap: float | None = Field(default=None, gt=0.0)  # only when the job asks for more


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill: ExtractedSkill
    priority: Priority
    estimated_hours: int = Field(gt=0)
    resources: list[LearningResource] = []
    prerequisites: list[str] | None = None  # prerequisite skills the user still lacks


class GapAnalysisResult(BaseModel):
    """Outcome of comparing one profile against one job. Immutable once produced."""
    model_config = ConfigDict(frozen=True)

    job_id: str
    user_id: str
    matches: list[SkillMatch] = []
    missing: list[ExtractedSkill] = []
    overall_match: float = Field(ge=0.0, le=1.0)
    recommendations: list[Recommendation] = []
    analysis_date: datetime

    @property
    def job_skills(self) -> list[ExtractedSkill]:
        """Every skill extracted from the job, matched ones first."""
        return [m.job_skill for m in self.matches] + list(self.missing)


class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_url: str
    content_hash: str
    analysis: GapAnalysisResult
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
