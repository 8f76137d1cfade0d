"""Tests for priorities, hour estimates and learning resource selection."""

import pytest

from factories import make_skill
from skillgap.errors import TaxonomyDataError
from skillgap.models import (
    DifficultyLevel,
    ExperienceLevel,
    LearningResource,
    Priority,
    ProficiencyLevel,
    ResourceType,
    SkillCategory,
    UserPreferences,
    UserProfile,
    UserSkill,
)
from skillgap.services.recommendation_engine import (
    RecommendationEngine,
    estimate_hours,
    priority_for,
    priority_score,
)


def resource(title, url=None, rating=None, duration=None, cost=None, difficulty=DifficultyLevel.INTERMEDIATE):
    return LearningResource(
        title=title,
        type=ResourceType.COURSE,
        url=url or f"https://example.com/{title}",
        provider="Example",
        rating=rating,
        duration=duration,
        cost=cost,
        difficulty=difficulty,
    )


@pytest.fixture(scope="module")
def bundled():
    engine = RecommendationEngine()
    engine.ensure_loaded()
    return engine


class TestPriority:
    @pytest.mark.parametrize(
        "skill, expected",
        [
            (make_skill("rust", confidence=1.0, is_required=True), Priority.CRITICAL),
            (make_skill("docker", SkillCategory.TOOLS, confidence=0.8, is_required=True), Priority.HIGH),
            (make_skill("django", SkillCategory.FRAMEWORKS, confidence=0.8), Priority.HIGH),
            (make_skill("kanban", SkillCategory.METHODOLOGIES, confidence=0.8), Priority.MEDIUM),
            (make_skill("teamwork", SkillCategory.SOFT_SKILLS, confidence=0.5), Priority.LOW),
        ],
    )
    def test_priority_bands(self, skill, expected):
        assert priority_for(priority_score(skill)) == expected

    def test_score_components(self):
        skill = make_skill("rust", confidence=1.0, is_required=True)
        assert priority_score(skill) == pytest.approx(100)

    def test_thresholds_inclusive(self):
        assert priority_for(80) == Priority.CRITICAL
        assert priority_for(79.99) == Priority.HIGH
        assert priority_for(40) == Priority.MEDIUM
        assert priority_for(39.9) == Priority.LOW


class TestEstimatedHours:
    def test_experienced_user_with_related_skill(self, profile):
        # tools base 30, >5 years x0.8, one tools skill x0.9
        assert estimate_hours(make_skill("kubernetes", SkillCategory.TOOLS), profile) == 22

    def test_related_skills_reduce_estimate(self, profile):
        # technical base 80 x0.8, two technical skills x0.8
        assert estimate_hours(make_skill("rust"), profile) == 51

    def test_junior_user(self):
        profile = UserProfile(id="u", experience=ExperienceLevel(total_years=1))
        assert estimate_hours(make_skill("spanish", SkillCategory.LANGUAGES), profile) == 240

    def test_related_multiplier_floor(self):
        skills = [
            UserSkill(name=f"lang{i}", category=SkillCategory.TECHNICAL, proficiency=ProficiencyLevel.BEGINNER)
            for i in range(8)
        ]
        profile = UserProfile(id="u", skills=skills, experience=ExperienceLevel(total_years=10))
        assert estimate_hours(make_skill("rust"), profile) == 32


class TestResources:
    @pytest.fixture
    def engine(self):
        return RecommendationEngine.from_tables({
            "docker": [
                resource("paid-top", rating=5.0, cost=99),
                resource("free-low", rating=3.0),
                resource("free-top-advanced", rating=4.8, difficulty=DifficultyLevel.ADVANCED),
                resource("free-top-beginner", rating=4.8, difficulty=DifficultyLevel.BEGINNER),
                resource("free-too-long", rating=5.0, duration=100),
                resource("dup", url="https://example.com/free-low", rating=1.0),
            ],
        })

    def test_sorted_free_then_rating_then_difficulty(self, engine, profile):
        titles = [r.title for r in engine.select_resources(make_skill("docker", SkillCategory.TOOLS), profile)]
        assert titles == ["free-top-beginner", "free-top-advanced", "free-low", "paid-top"]

    def test_no_commitment_keeps_long_resources(self, engine):
        profile = UserProfile(id="u", preferences=UserPreferences(time_commitment=0))
        titles = [r.title for r in engine.select_resources(make_skill("docker", SkillCategory.TOOLS), profile)]
        assert titles[0] == "free-too-long"
        assert len(titles) == 5

    def test_duplicate_urls_dropped(self, engine, profile):
        resources = engine.select_resources(make_skill("docker", SkillCategory.TOOLS), profile)
        urls = [r.url for r in resources]
        assert len(urls) == len(set(urls))

    def test_synonym_lookup(self, engine, profile):
        skill = make_skill("containers", SkillCategory.TOOLS, synonyms=["docker"])
        assert engine.select_resources(skill, profile)

    def test_unknown_skill_has_no_resources(self, engine, profile):
        assert engine.select_resources(make_skill("cobol"), profile) == []


class TestPrerequisites:
    def test_filters_known_prerequisites(self, bundled, profile):
        missing = bundled.missing_prerequisites(make_skill("react", SkillCategory.FRAMEWORKS), profile)
        assert missing == ["html", "css"]

    def test_none_when_all_known(self, bundled):
        profile = UserProfile(
            id="u",
            skills=[UserSkill(name="Python", category=SkillCategory.TECHNICAL, proficiency=ProficiencyLevel.BEGINNER)],
        )
        assert bundled.missing_prerequisites(make_skill("django", SkillCategory.FRAMEWORKS), profile) is None

    def test_none_without_table_entry(self, bundled, profile):
        assert bundled.missing_prerequisites(make_skill("rust"), profile) is None


class TestRecommend:
    def test_ordering(self, bundled, profile):
        missing = [
            make_skill("teamwork", SkillCategory.SOFT_SKILLS, confidence=0.5),
            make_skill("kubernetes", SkillCategory.TOOLS, confidence=0.8, is_required=True),
            make_skill("rust", confidence=1.0, is_required=True),
            make_skill("terraform", SkillCategory.TOOLS, confidence=0.8, is_required=True),
        ]
        recs = bundled.recommend(missing, profile)
        assert [r.skill.name for r in recs][0] == "rust"
        assert recs[-1].skill.name == "teamwork"
        ranks = [r.priority.rank for r in recs]
        assert ranks == sorted(ranks, reverse=True)

    def test_ties_broken_by_category_weight_then_hours(self, bundled, profile):
        missing = [
            make_skill("kanban", SkillCategory.METHODOLOGIES, confidence=0.9),
            make_skill("django", SkillCategory.FRAMEWORKS, confidence=0.5),
        ]
        recs = bundled.recommend(missing, profile)
        assert all(r.priority == Priority.MEDIUM for r in recs)
        assert [r.skill.name for r in recs] == ["django", "kanban"]

    def test_bundled_resources_attached(self, bundled, profile):
        [rec] = bundled.recommend([make_skill("kubernetes", SkillCategory.TOOLS)], profile)
        assert rec.resources
        assert len(rec.resources) <= 5
        assert rec.estimated_hours > 0
        assert rec.prerequisites == ["docker", "containerization"]

    def test_skill_without_table_entry_still_recommended(self, bundled, profile):
        [rec] = bundled.recommend([make_skill("cobol")], profile)
        assert rec.resources == []
        assert rec.prerequisites is None

    def test_empty(self, bundled, profile):
        assert bundled.recommend([], profile) == []


def test_malformed_resource_table(tmp_path):
    path = tmp_path / "resources.yaml"
    path.write_text("resources:\n  docker:\n    - {title: x, type: podcast, url: u, provider: p}\n")
    with pytest.raises(TaxonomyDataError):
        RecommendationEngine(path=path).load()
