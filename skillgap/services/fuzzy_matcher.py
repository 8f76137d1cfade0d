"""Edit-distance similarity for near-miss skill names ("postgres" vs "postgresql")."""

from typing import Iterable

from rapidfuzz.distance import Levenshtein

from skillgap.config import Settings, settings as default_settings


def similarity(a: str, b: str) -> float:
    """1 - edit_distance / max(len(a), len(b)). Symmetric; similarity(a, a) == 1."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return Levenshtein.normalized_similarity(a, b)


class FuzzyMatcher:
    def __init__(self, threshold: float | None = None, config: Settings | None = None) -> None:
        config = config or default_settings
        self.threshold = config.fuzzy_threshold if threshold is None else threshold

    def similarity(self, a: str, b: str) -> float:
        return similarity(a.lower(), b.lower())

    def is_same_skill(self, a: str, b: str) -> bool:
        return self.similarity(a, b) > self.threshold

    def best_match(self, name: str, candidates: Iterable[str]) -> str | None:
        """First candidate above the threshold, in iteration order.

        Candidates are not ranked by score: callers pass them in a canonical
        order and the earliest acceptable one wins.
        """
        for candidate in candidates:
            if self.is_same_skill(name, candidate):
                return candidate
        return None
