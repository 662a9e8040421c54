"""
Pytest fixtures for testing.

Provides:
- Guard settings isolated from the environment
- Default guard and decision engine
- Sample resources (projects, subteams)
"""

import pytest

from resource_guard import AccessDecisionEngine, GuardSettings, ResourceGuard

from tests.models import ProjectModel, SubTeamModel, TeamModel


@pytest.fixture
def settings() -> GuardSettings:
    """Settings with defaults, ignoring any .env file."""
    return GuardSettings(_env_file=None)


@pytest.fixture
def engine() -> AccessDecisionEngine:
    return AccessDecisionEngine()


@pytest.fixture
def guard(settings: GuardSettings) -> ResourceGuard:
    """Guard using only registered resolvers."""
    return ResourceGuard(settings=settings)


# ============ Resources ============


@pytest.fixture
def project() -> ProjectModel:
    """Project abcd-1234 in team 1234-5678."""
    return ProjectModel("abcd-1234", TeamModel("1234-5678"))


@pytest.fixture
def subteam() -> SubTeamModel:
    """Subteam 1234-5678 in team abcdef."""
    return SubTeamModel("1234-5678", TeamModel("abcdef"))
