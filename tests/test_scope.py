"""
Tests for scope declaration and resolution.
"""

import pytest

from resource_guard import (
    AccessResolutionError,
    Accessible,
    GuardRegistry,
    InvalidArgumentError,
    ScopeResolutionNotFound,
    identity_of,
    resolve_scope_object,
    scope_accessor,
)
from resource_guard.scope import is_accessible

from tests.models import (
    BrokenModel,
    Invoice,
    PlainModel,
    ProjectModel,
    SubTeamModel,
    TeamModel,
)


def test_resolve_declared_scope(project: ProjectModel):
    assert resolve_scope_object(project, "team") is project.team


def test_resolve_self_referential_scope(subteam: SubTeamModel):
    assert resolve_scope_object(subteam, "subteam") is subteam


def test_resolve_externally_registered_scope():
    team = TeamModel("t-1")

    assert resolve_scope_object(Invoice(team), "team") is team


def test_resolve_undeclared_scope(project: ProjectModel):
    """ProjectModel has no 'subteam' accessor."""
    with pytest.raises(ScopeResolutionNotFound) as exc_info:
        resolve_scope_object(project, "subteam")

    assert exc_info.value.scope_type == "subteam"
    assert exc_info.value.resource_type is ProjectModel


def test_resolve_scope_returning_none():
    with pytest.raises(ScopeResolutionNotFound):
        resolve_scope_object(ProjectModel("p-1", None), "team")


@pytest.mark.parametrize("scope_type", ["", None])
def test_resolve_empty_scope_type(project: ProjectModel, scope_type):
    """Empty scope type is a caller error, not 'not found'."""
    with pytest.raises(InvalidArgumentError):
        resolve_scope_object(project, scope_type)


def test_resolve_accessor_error_is_surfaced():
    with pytest.raises(AccessResolutionError) as exc_info:
        resolve_scope_object(BrokenModel(), "team")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_accessors_are_inherited():
    class ArchivedProject(ProjectModel):
        pass

    project = ArchivedProject("p-1", TeamModel("t-1"))

    assert resolve_scope_object(project, "team").get_id() == "t-1"
    assert "team" in GuardRegistry.list_scope_types(ArchivedProject)


def test_subclass_can_override_accessor():
    class ReassignedProject(ProjectModel):
        @scope_accessor("team")
        def get_owner_team(self) -> TeamModel:
            return TeamModel("owner")

    project = ReassignedProject("p-1", TeamModel("t-1"))

    assert resolve_scope_object(project, "team").get_id() == "owner"


def test_undecorated_override_supplies_scope_object():
    """Overriding the accessor method without re-marking it still takes effect."""

    class TransferredProject(ProjectModel):
        def get_team(self) -> TeamModel:
            return TeamModel("new-team")

    project = TransferredProject("p-1", TeamModel("old-team"))

    assert resolve_scope_object(project, "team").get_id() == "new-team"


def test_scope_accessor_requires_scope_type():
    with pytest.raises(InvalidArgumentError):
        scope_accessor("")


def test_is_accessible():
    assert is_accessible(ProjectModel("p-1", None))
    assert is_accessible(Invoice(TeamModel("t-1")))
    assert not is_accessible(PlainModel("x"))
    assert not is_accessible(TeamModel("t-1"))


def test_accessible_without_accessors_is_still_accessible():
    class Empty(Accessible):
        pass

    assert is_accessible(Empty())


@pytest.mark.parametrize(
    "scope_object, expected",
    [
        (TeamModel("1234-5678"), "1234-5678"),
        (TeamModel(42), "42"),
        (TeamModel(None), None),
        (TeamModel(""), None),
        (PlainModel("x"), None),  # not Identifiable
    ],
)
def test_identity_of(scope_object, expected):
    assert identity_of(scope_object) == expected
