"""Skill gap analysis: extract skills from job postings, compare them with a
user's inventory and recommend what to learn next."""

from skillgap.errors import (
    AnalysisError,
    NoContentError,
    ProfileUnavailableError,
    SkillGapError,
    TaxonomyDataError,
    TaxonomyUninitializedError,
)
from skillgap.services.orchestrator import HistoryStore, ProfileProvider, SkillGapEngine

__version__ = "1.0.0"

__all__ = [
    "AnalysisError",
    "HistoryStore",
    "NoContentError",
    "ProfileProvider",
    "ProfileUnavailableError",
    "SkillGapEngine",
    "SkillGapError",
    "TaxonomyDataError",
    "TaxonomyUninitializedError",
]
