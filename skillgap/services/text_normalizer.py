"""Text normalization for skill scanning and taxonomy keys.

Two normalizations are kept apart:
- normalize_text: applied to job text before scanning. Keeps the symbols that
  appear inside skill names (c#, c++, node.js, ci/cd, objective-c).
- normalize_skill_name: applied to taxonomy keys and candidate tokens. Same
  idea, but "/" is dropped so lookups compare on the bare name.
"""

import re

from skillgap.config import Settings, settings as default_settings
from skillgap.models.job import JobText

_SCAN_NOISE = re.compile(r"[^\w\s\-.#+/]")
_KEY_NOISE = re.compile(r"[^\w\s\-.#+]")
_WHITESPACE = re.compile(r"\s+")

# Terms that make a block of text read like a job posting
JOB_KEYWORDS: tuple[str, ...] = (
    "experience", "skills", "requirements", "responsibilities",
    "qualifications", "education", "degree", "years", "work",
    "team", "role", "position", "job", "career",
)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize_text(text: str) -> str:
    """Lowercase, replace noise characters with spaces and collapse whitespace."""
    if not text:
        return ""
    return collapse_whitespace(_SCAN_NOISE.sub(" ", text.lower()))


def normalize_skill_name(name: str) -> str:
    """Canonical lookup key for a skill name, synonym or candidate token."""
    if not name:
        return ""
    return collapse_whitespace(_KEY_NOISE.sub("", name.lower()))


def count_job_keywords(text: str) -> int:
    """Number of distinct job-posting terms present in text."""
    lowered = text.lower()
    return sum(1 for kw in JOB_KEYWORDS if kw in lowered)


def is_valid_job_content(job: JobText, config: Settings | None = None) -> bool:
    """Check that extracted page content looks like an actual job posting.

    The description must be longer than ``min_content_length`` characters and
    mention at least ``min_job_keywords`` job-related terms. Requirements text
    does not count toward either threshold.
    """
    config = config or default_settings
    description = (job.description or "").strip()
    if len(description) <= config.min_content_length:
        return False
    return count_job_keywords(description) >= config.min_job_keywords
