"""Longitudinal skill trends across past gap analyses."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import numpy as np

from skillgap.models.analysis import GapAnalysisResult
from skillgap.models.skills import SkillCategory
from skillgap.models.trends import SkillTrend, TrendDirection

logger = logging.getLogger(__name__)

MIN_HISTORY = 3
MIN_OCCURRENCES = 2
DIRECTION_THRESHOLD = 0.1


@dataclass(frozen=True)
class _Occurrence:
    timestamp: datetime
    confidence: float
    category: SkillCategory
    job_id: str


def collect_occurrences(history: Sequence[GapAnalysisResult]) -> dict[str, list[_Occurrence]]:
    """Skill name -> one occurrence per history entry that mentions it, in history order."""
    occurrences: dict[str, list[_Occurrence]] = {}
    for result in history:
        seen: set[str] = set()
        for skill in result.job_skills:
            name = skill.name.lower()
            if name in seen:
                continue
            seen.add(name)
            occurrences.setdefault(name, []).append(
                _Occurrence(result.analysis_date, skill.confidence, skill.category, result.job_id)
            )
    return occurrences


def trend_direction(confidences: Sequence[float]) -> TrendDirection:
    """Compare the mean of the later half of time-ordered values with the earlier half."""
    values = np.asarray(confidences, dtype=float)
    half = len(values) // 2
    if half == 0:
        return TrendDirection.STABLE
    delta = values[half:].mean() - values[:half].mean()
    if delta > DIRECTION_THRESHOLD:
        return TrendDirection.INCREASING
    if delta < -DIRECTION_THRESHOLD:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


class TrendAnalyzer:
    def trends(self, history: Sequence[GapAnalysisResult], limit: int | None = None) -> list[SkillTrend]:
        """Per-skill trends, increasing first, then by frequency.

        Histories shorter than three entries carry no trend judgement and
        yield an empty list. Skills seen in fewer than two entries are skipped.
        """
        if len(history) < MIN_HISTORY:
            logger.debug("History too short for trends: %d entries", len(history))
            return []

        results: list[SkillTrend] = []
        for name, occurrences in collect_occurrences(history).items():
            if len(occurrences) < MIN_OCCURRENCES:
                continue
            ordered = sorted(occurrences, key=lambda o: o.timestamp)
            confidences = [o.confidence for o in ordered]
            job_ids = list(dict.fromkeys(o.job_id for o in ordered))
            results.append(SkillTrend(
                skill_name=name,
                category=ordered[-1].category,
                trend_direction=trend_direction(confidences),
                frequency=len(ordered),
                average_importance=float(np.mean(confidences)),
                job_count=len(job_ids),
                job_ids=job_ids,
            ))

        results.sort(key=lambda t: (t.trend_direction != TrendDirection.INCREASING, -t.frequency))
        if limit is not None:
            results = results[:limit]
        logger.debug("Computed %d skill trends from %d analyses", len(results), len(history))
        return results
