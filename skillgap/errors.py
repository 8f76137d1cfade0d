"""Exceptions raised by the skill gap pipeline.

Every pipeline failure carries the stage it happened in and the job it was
working on, so the host can report it upward without re-deriving context.
"""

from typing import Optional


class SkillGapError(Exception):
    """
    Base class for all named pipeline failures.

    Attributes:
        message: Error description
        stage: Pipeline stage name (e.g. 'extracting_skills')
        job_id: Identifier of the job being analyzed, if known
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        job_id: Optional[str] = None,
    ):
        self.message = message
        self.stage = stage
        self.job_id = job_id

        parts = [message]
        if stage:
            parts.append(f"stage={stage}")
        if job_id:
            parts.append(f"job_id={job_id}")

        super().__init__(" | ".join(parts))


class NoContentError(SkillGapError):
    """Job text is missing, too short, or does not read like a job posting."""


class ProfileUnavailableError(SkillGapError):
    """The profile collaborator returned nothing or failed."""


class TaxonomyUninitializedError(SkillGapError):
    """A taxonomy lookup was attempted before the taxonomy was loaded."""


class AnalysisError(SkillGapError):
    """Unexpected failure inside a pipeline stage. The original error is chained."""


class TaxonomyDataError(ValueError):
    """A static data asset (taxonomy, resource table) failed validation at load time."""

    pass
