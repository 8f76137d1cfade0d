"""Taxonomy and extraction schemas: what a skill is and how one was found in a posting."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SkillCategory(str, Enum):
    TECHNICAL = "technical"
    FRAMEWORKS = "frameworks"
    TOOLS = "tools"
    CERTIFICATIONS = "certifications"
    LANGUAGES = "languages"
    METHODOLOGIES = "methodologies"
    SOFT_SKILLS = "soft_skills"


class SkillDefinition(BaseModel):
    """A single taxonomy entry, loaded once from the static data asset."""
    model_config = ConfigDict(frozen=True)

    name: str  # canonical, lowercase
    category: SkillCategory
    synonyms: list[str] = []
    patterns: list[str] = []  # raw match patterns scanned in addition to name + synonyms


class ExtractedSkill(BaseModel):
    """A skill detected in job text. Never mutated after extraction."""
    model_config = ConfigDict(frozen=True)

    name: str
    category: SkillCategory
    confidence: float = Field(ge=0.0, le=1.0)
    context: str = ""  # bounded text window around the match
    is_required: bool = False
    synonyms: list[str] = []
