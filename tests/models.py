"""
Test models and resolvers shared across the test suite.
"""

from typing import Any

from resource_guard import (
    Accessible,
    Authentication,
    GuardRegistry,
    Identifiable,
    UserDetails,
    UserResolver,
    scope_accessor,
)


class TeamModel(Identifiable):
    """A team; only identifiable, never guarded directly."""

    def __init__(self, id: Any):
        self.id = id

    def get_id(self) -> Any:
        return self.id


class ProjectModel(Accessible, Identifiable):
    """A project belonging to a team."""

    def __init__(self, id: str, team: TeamModel | None):
        self.id = id
        self.team = team

    def get_id(self) -> str:
        return self.id

    @scope_accessor("team")
    def get_team(self) -> TeamModel | None:
        return self.team


class SubTeamModel(Accessible, Identifiable):
    """A subteam: resolves 'team' to its parent and 'subteam' to itself."""

    def __init__(self, id: str, team: TeamModel):
        self.id = id
        self.team = team

    def get_id(self) -> str:
        return self.id

    @scope_accessor("team")
    def get_team(self) -> TeamModel:
        return self.team

    @scope_accessor("subteam")
    def get_subteam(self) -> "SubTeamModel":
        return self


class BrokenModel(Accessible):
    """Accessor raises."""

    @scope_accessor("team")
    def get_team(self) -> TeamModel:
        raise RuntimeError("database unavailable")


class PlainModel:
    """Declares no scopes at all."""

    def __init__(self, id: str):
        self.id = id


class Invoice:
    """Third-party style model registered externally."""

    def __init__(self, team: TeamModel):
        self.team = team


GuardRegistry.register_scope_accessor(Invoice, "team", lambda invoice: invoice.team)


@GuardRegistry.user_resolver("stub")
class StubUserResolver(UserResolver):
    """
    Resolver returning a fixed user and recording the values it was given.
    """

    def __init__(self, user: UserDetails | None = None, **kwargs: Any):
        self.user = user or UserDetails("username", ("ROLE_TEAM_ADMIN_0000-0000",))
        self.calls: list[Any] = []

    def resolve(self, value: Any) -> UserDetails:
        self.calls.append(value)
        return self.user


class FailingUserResolver(UserResolver):
    """Resolver whose backend is down."""

    def resolve(self, value: Any) -> UserDetails:
        raise ConnectionError("user directory unreachable")


def build_user(*authorities: str, username: str = "username") -> UserDetails:
    """User with the given authorities."""
    return UserDetails(username, authorities)


def build_authentication(*authorities: str) -> Authentication:
    """Authentication whose principal holds the given authorities."""
    return Authentication(build_user(*authorities))
