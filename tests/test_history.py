"""Tests for history search, skill frequency and job comparison."""

from datetime import timedelta

import pytest

from factories import T0, make_result, make_skill
from skillgap.models import SkillCategory
from skillgap.services.history import compare_jobs, search_history, skill_frequency

TOOLS = SkillCategory.TOOLS


@pytest.fixture
def history():
    return [
        make_result(
            "job-a",
            [make_skill("python", confidence=0.9), make_skill("docker", TOOLS, 0.6, synonyms=["containers"])],
            when=T0,
            overall_match=0.4,
        ),
        make_result(
            "job-b",
            [make_skill("python", confidence=0.7), make_skill("kubernetes", TOOLS)],
            when=T0 + timedelta(days=1),
            overall_match=0.8,
        ),
        make_result(
            "job-c",
            [make_skill("python", confidence=0.8), make_skill("docker", TOOLS, 1.0)],
            when=T0 + timedelta(days=2),
            overall_match=0.6,
        ),
    ]


def ids(entries):
    return [e.job_id for e in entries]


class TestSearchHistory:
    def test_no_filters_returns_everything(self, history):
        assert ids(search_history(history)) == ["job-a", "job-b", "job-c"]

    def test_skill_substring(self, history):
        assert ids(search_history(history, skill_name="Dock")) == ["job-a", "job-c"]

    def test_skill_synonym(self, history):
        assert ids(search_history(history, skill_name="contain")) == ["job-a"]

    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            ({"min_match": 0.5}, ["job-b", "job-c"]),
            ({"max_match": 0.5}, ["job-a"]),
            ({"date_from": T0 + timedelta(days=1)}, ["job-b", "job-c"]),
            ({"date_to": T0 + timedelta(days=1)}, ["job-a", "job-b"]),
            ({"limit": 2}, ["job-a", "job-b"]),
            ({"skill_name": "python", "min_match": 0.7}, ["job-b"]),
        ],
    )
    def test_filters(self, history, kwargs, expected):
        assert ids(search_history(history, **kwargs)) == expected


class TestSkillFrequency:
    def test_most_frequent_first(self, history):
        freqs = skill_frequency(history)
        assert [(f.skill_name, f.frequency) for f in freqs] == [
            ("python", 3), ("docker", 2), ("kubernetes", 1),
        ]
        assert freqs[0].average_importance == pytest.approx(0.8)
        assert freqs[1].job_ids == ["job-a", "job-c"]

    def test_repeated_skill_counted_once_per_entry(self):
        entry = make_result("job-x", [make_skill("sql"), make_skill("SQL")])
        [freq] = skill_frequency([entry])
        assert freq.frequency == 1

    def test_empty(self):
        assert skill_frequency([]) == []


class TestCompareJobs:
    def test_common_and_unique(self, history):
        comparison = compare_jobs(history, ["job-a", "job-b"])
        assert [s.name for s in comparison.common_skills] == ["python"]
        assert {k: [s.name for s in v] for k, v in comparison.unique_skills.items()} == {
            "job-a": ["docker"],
            "job-b": ["kubernetes"],
        }
        assert comparison.match_scores == {"job-a": 0.4, "job-b": 0.8}
        assert comparison.job_ids == ["job-a", "job-b"]

    def test_three_jobs(self, history):
        comparison = compare_jobs(history, ["job-a", "job-b", "job-c"])
        assert [s.name for s in comparison.common_skills] == ["python"]
        assert [s.name for s in comparison.unique_skills["job-c"]] == ["docker"]
        assert comparison.skill_frequency[0].skill_name == "python"

    def test_needs_two_jobs(self, history):
        with pytest.raises(ValueError, match="At least 2 jobs"):
            compare_jobs(history, ["job-a"])

    def test_unknown_job(self, history):
        with pytest.raises(ValueError, match="job-z"):
            compare_jobs(history, ["job-a", "job-z"])
