"""Job content handed over by the content-acquisition collaborator, plus progress reporting."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class JobText(BaseModel):
    """Textual fields of a job posting. Only these participate in the content hash."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    company: str = ""
    description: str = ""
    requirements: str = ""

    def full_text(self) -> str:
        """Text the extractor runs over: description followed by requirements."""
        return "\n".join(part for part in (self.description, self.requirements) if part)


class AnalysisStage(str, Enum):
    INITIALIZING = "initializing"
    EXTRACTING_CONTENT = "extracting_content"
    EXTRACTING_SKILLS = "extracting_skills"
    MATCHING_SKILLS = "matching_skills"
    GENERATING_RECOMMENDATIONS = "generating_recommendations"
    COMPLETE = "complete"
    ERROR = "error"


class AnalysisProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: AnalysisStage
    progress: int = Field(ge=0, le=100)
    message: str = ""
    timestamp: datetime
