"""Tests for skill trend direction and ordering."""

from datetime import timedelta

import pytest

from factories import T0, make_result, make_skill
from skillgap.models import SkillCategory, TrendDirection
from skillgap.services.trend_analyzer import TrendAnalyzer, trend_direction


def history_for(name, confidences, category=SkillCategory.TOOLS, extra=None):
    """One history entry per confidence, one day apart."""
    return [
        make_result(
            f"job-{i}",
            [make_skill(name, category, confidence=c)] + list(extra or []),
            when=T0 + timedelta(days=i),
        )
        for i, c in enumerate(confidences)
    ]


@pytest.fixture
def analyzer():
    return TrendAnalyzer()


class TestTrendDirection:
    def test_increasing(self):
        assert trend_direction([0.6, 0.6, 0.9, 0.9, 0.9]) == TrendDirection.INCREASING

    def test_decreasing(self):
        assert trend_direction([0.9, 0.9, 0.6, 0.6]) == TrendDirection.DECREASING

    def test_small_change_is_stable(self):
        assert trend_direction([0.7, 0.75, 0.78]) == TrendDirection.STABLE

    def test_single_value(self):
        assert trend_direction([0.5]) == TrendDirection.STABLE


class TestTrends:
    def test_rising_confidence_is_increasing(self, analyzer):
        history = history_for("kubernetes", [0.6, 0.6, 0.9, 0.9, 0.9])
        [trend] = analyzer.trends(history)
        assert trend.skill_name == "kubernetes"
        assert trend.trend_direction == TrendDirection.INCREASING
        assert trend.frequency == 5
        assert trend.average_importance == pytest.approx(0.78)
        assert trend.job_count == 5

    def test_short_history_has_no_trends(self, analyzer):
        assert analyzer.trends(history_for("kubernetes", [0.6, 0.9])) == []

    def test_entries_sorted_by_time_not_list_order(self, analyzer):
        history = list(reversed(history_for("kubernetes", [0.6, 0.6, 0.9, 0.9])))
        [trend] = analyzer.trends(history)
        assert trend.trend_direction == TrendDirection.INCREASING

    def test_rare_skills_skipped(self, analyzer):
        history = history_for("kubernetes", [0.8, 0.8, 0.8])
        history.append(make_result("job-x", [make_skill("cobol")], when=T0 + timedelta(days=9)))
        assert [t.skill_name for t in analyzer.trends(history)] == ["kubernetes"]

    def test_increasing_first_then_frequency(self, analyzer):
        steady = make_skill("python", confidence=0.8)
        history = history_for("kubernetes", [0.5, 0.5, 0.9, 0.9], extra=[steady])
        history[0] = make_result("job-0", [make_skill("kubernetes", SkillCategory.TOOLS, confidence=0.5)], when=T0)
        trends = analyzer.trends(history)
        assert [t.skill_name for t in trends] == ["kubernetes", "python"]
        assert trends[1].trend_direction == TrendDirection.STABLE
        assert trends[1].frequency == 3

    def test_limit_applied_after_sorting(self, analyzer):
        steady = [make_skill("python", confidence=0.8), make_skill("sql", confidence=0.8)]
        history = history_for("kubernetes", [0.5, 0.5, 0.9, 0.9], extra=steady)
        assert [t.skill_name for t in analyzer.trends(history, limit=1)] == ["kubernetes"]

    def test_category_from_latest_occurrence(self, analyzer):
        history = history_for("ansible", [0.7, 0.7, 0.7], category=SkillCategory.TECHNICAL)
        history.append(
            make_result("job-9", [make_skill("ansible", SkillCategory.TOOLS, confidence=0.7)],
                        when=T0 + timedelta(days=9))
        )
        [trend] = analyzer.trends(history)
        assert trend.category == SkillCategory.TOOLS
