"""User profile schemas. Owned by the profile collaborator; read-only to the engine."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from skillgap.models.skills import SkillCategory


class ProficiencyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return list(ProficiencyLevel).index(self)


class ExperienceLevelType(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    EXECUTIVE = "executive"


class LearningStyle(str, Enum):
    VISUAL = "visual"
    AUDITORY = "auditory"
    KINESTHETIC = "kinesthetic"
    READING = "reading"


class UserSkill(BaseModel):
    """A skill the user declares in their inventory."""
    model_config = ConfigDict(frozen=True)

    name: str
    category: SkillCategory
    proficiency: ProficiencyLevel
    years_of_experience: float | None = Field(default=None, ge=0.0)
    certifications: list[str] = []
    synonyms: list[str] = []


class ExperienceLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_years: float = Field(default=0.0, ge=0.0)
    level: ExperienceLevelType = ExperienceLevelType.MID


class UserPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    preferred_learning_style: list[LearningStyle] = []
    time_commitment: float = Field(default=0.0, ge=0.0)  # hours per week
    focus_areas: list[SkillCategory] = []


class UserProfile(BaseModel):
    """The user's skill inventory and learning preferences.

    Skill order is significant: when two profile skills claim the same name or
    synonym, the earlier one wins during matching.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    skills: list[UserSkill] = []
    experience: ExperienceLevel = ExperienceLevel()
    preferences: UserPreferences = UserPreferences()

    def skill_names(self) -> set[str]:
        """Lowercased names and synonyms of every declared skill."""
        names: set[str] = set()
        for skill in self.skills:
            names.add(skill.name.lower())
            names.update(s.lower() for s in skill.synonyms)
        return names
