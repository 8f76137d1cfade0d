"""Queries over a supplied analysis history: search, job comparison, skill frequency.

History itself is owned by the storage collaborator; everything here is a pure
function of the list it is given.
"""

from datetime import datetime
from typing import Sequence

import numpy as np

from skillgap.models.analysis import GapAnalysisResult
from skillgap.models.skills import ExtractedSkill
from skillgap.models.trends import JobComparison, SkillFrequency


def _mentions(result: GapAnalysisResult, needle: str) -> bool:
    for skill in result.job_skills:
        if needle in skill.name.lower():
            return True
        if any(needle in s.lower() for s in skill.synonyms):
            return True
    return False


def search_history(
    history: Sequence[GapAnalysisResult],
    skill_name: str | None = None,
    min_match: float | None = None,
    max_match: float | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: int | None = None,
) -> list[GapAnalysisResult]:
    """Filter history entries. All filters are optional and combine with AND.

    skill_name matches any extracted skill whose name or synonym contains it,
    case-insensitively.
    """
    entries = list(history)
    if skill_name:
        needle = skill_name.lower()
        entries = [e for e in entries if _mentions(e, needle)]
    if min_match is not None:
        entries = [e for e in entries if e.overall_match >= min_match]
    if max_match is not None:
        entries = [e for e in entries if e.overall_match <= max_match]
    if date_from is not None:
        entries = [e for e in entries if e.analysis_date >= date_from]
    if date_to is not None:
        entries = [e for e in entries if e.analysis_date <= date_to]
    if limit is not None and limit > 0:
        entries = entries[:limit]
    return entries


def skill_frequency(history: Sequence[GapAnalysisResult]) -> list[SkillFrequency]:
    """How many entries mention each skill and with what mean confidence. Most frequent first."""
    confidences: dict[str, list[float]] = {}
    job_ids: dict[str, list[str]] = {}
    for result in history:
        seen: set[str] = set()
        for skill in result.job_skills:
            name = skill.name.lower()
            if name in seen:
                continue
            seen.add(name)
            confidences.setdefault(name, []).append(skill.confidence)
            job_ids.setdefault(name, []).append(result.job_id)

    frequencies = [
        SkillFrequency(
            skill_name=name,
            frequency=len(values),
            average_importance=float(np.mean(values)),
            job_ids=job_ids[name],
        )
        for name, values in confidences.items()
    ]
    frequencies.sort(key=lambda f: -f.frequency)
    return frequencies


def compare_jobs(history: Sequence[GapAnalysisResult], job_ids: Sequence[str]) -> JobComparison:
    """Common and job-specific skills across two or more analyzed jobs.

    Raises:
        ValueError: fewer than two ids, or an id that is not in history.
    """
    if len(job_ids) < 2:
        raise ValueError("At least 2 jobs are required for comparison")

    wanted = set(job_ids)
    selected = [r for r in history if r.job_id in wanted]
    found = {r.job_id for r in selected}
    missing_ids = [j for j in job_ids if j not in found]
    if missing_ids:
        raise ValueError(f"Jobs not found in history: {', '.join(missing_ids)}")

    # Skill name -> (job_id, skill) per job that lists it, first listing per job only
    instances: dict[str, list[tuple[str, ExtractedSkill]]] = {}
    match_scores: dict[str, float] = {}
    for result in selected:
        match_scores.setdefault(result.job_id, result.overall_match)
        for skill in result.job_skills:
            bucket = instances.setdefault(skill.name.lower(), [])
            if all(job_id != result.job_id for job_id, _ in bucket):
                bucket.append((result.job_id, skill))

    job_count = len(found)
    common: list[ExtractedSkill] = []
    unique: dict[str, list[ExtractedSkill]] = {}
    for bucket in instances.values():
        if len(bucket) == job_count:
            common.append(bucket[0][1])
        else:
            for job_id, skill in bucket:
                unique.setdefault(job_id, []).append(skill)

    return JobComparison(
        job_ids=list(job_ids),
        common_skills=common,
        unique_skills=unique,
        match_scores=match_scores,
        skill_frequency=skill_frequency(selected),
    )
