"""Shared fixtures and pytest markers."""

import pytest

from factories import FakeClock
from skillgap.models import (
    ExperienceLevel,
    ProficiencyLevel,
    SkillCategory,
    UserPreferences,
    UserProfile,
    UserSkill,
)
from skillgap.services.skill_extractor import SkillExtractor
from skillgap.services.taxonomy import SkillTaxonomy


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: exercises the full bundled taxonomy end to end"
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="session")
def taxonomy():
    tax = SkillTaxonomy()
    tax.ensure_loaded()
    return tax


@pytest.fixture
def extractor(taxonomy):
    return SkillExtractor(taxonomy)


@pytest.fixture
def profile():
    return UserProfile(
        id="user-1",
        skills=[
            UserSkill(
                name="JavaScript",
                category=SkillCategory.TECHNICAL,
                proficiency=ProficiencyLevel.ADVANCED,
                synonyms=["js"],
            ),
            UserSkill(
                name="Python",
                category=SkillCategory.TECHNICAL,
                proficiency=ProficiencyLevel.EXPERT,
                years_of_experience=6,
            ),
            UserSkill(
                name="git",
                category=SkillCategory.TOOLS,
                proficiency=ProficiencyLevel.INTERMEDIATE,
            ),
        ],
        experience=ExperienceLevel(total_years=6),
        preferences=UserPreferences(time_commitment=10),
    )
