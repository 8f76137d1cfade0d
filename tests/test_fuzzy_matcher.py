"""Tests for edit-distance skill name matching."""

import pytest

from skillgap.services.fuzzy_matcher import FuzzyMatcher, similarity


def test_identical_strings():
    assert similarity("kubernetes", "kubernetes") == 1.0
    assert similarity("", "") == 1.0


def test_empty_vs_nonempty():
    assert similarity("", "python") == 0.0


def test_symmetric():
    assert similarity("postgres", "postgresql") == similarity("postgresql", "postgres")


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("postgres", "postgresql", 0.8),  # 2 inserts over 10
        ("react", "reacts", 5 / 6),
        ("java", "lava", 0.75),
    ],
)
def test_normalized_edit_distance(a, b, expected):
    assert similarity(a, b) == pytest.approx(expected)


class TestFuzzyMatcher:
    def test_threshold_is_strict(self):
        matcher = FuzzyMatcher(threshold=0.8)
        assert not matcher.is_same_skill("postgres", "postgresql")
        assert matcher.is_same_skill("typescript", "typescrpt")

    def test_case_insensitive(self):
        assert FuzzyMatcher().similarity("Docker", "docker") == 1.0

    def test_best_match_takes_first_acceptable(self):
        matcher = FuzzyMatcher(threshold=0.8)
        assert matcher.best_match("kubernets", ["kubernetes", "kubernete"]) == "kubernetes"
        assert matcher.best_match("kubernets", ["python"]) is None

    def test_threshold_from_settings(self):
        from skillgap.config import Settings

        matcher = FuzzyMatcher(config=Settings(fuzzy_threshold=0.5))
        assert matcher.threshold == 0.5
