"""
Scope requirements and user-resolution grouping.

A protected operation declares an ordered list of ScopeRequirement.
Requirements sharing the same UserResolution form a group: the acting
user is resolved once per group and must satisfy ANY requirement of the
group. Every group must pass.

Usage:
    requirements = [
        ScopeRequirement("subteam", {"USER"}),
        ScopeRequirement("team", {"ADMIN"}),
        ScopeRequirement("team", {"ADMIN"}, user_id_param="member_id", user_resolver="member"),
    ]
    groups = group_by_resolution(requirements)
    # {UserResolution("", "default"): [subteam USER, team ADMIN],
    #  UserResolution("member_id", "member"): [team ADMIN]}
"""

from dataclasses import dataclass, field
from typing import Iterable

from .exceptions import InvalidArgumentError

DEFAULT_RESOLVER = "default"


@dataclass(frozen=True)
class UserResolution:
    """
    How to obtain the acting user.

    Attributes:
        user_id_param: Name of the call argument passed to the resolver
            (empty: use the call's Authentication)
        user_resolver: Registered name of the resolver

    Two resolutions are equal when both fields are equal.
    """
    user_id_param: str = ""
    user_resolver: str = DEFAULT_RESOLVER

    def __post_init__(self) -> None:
        if not isinstance(self.user_id_param, str):
            raise InvalidArgumentError(
                "User id parameter is required when creating a UserResolution"
            )
        if not isinstance(self.user_resolver, str) or not self.user_resolver:
            raise InvalidArgumentError(
                "User resolver is required when creating a UserResolution"
            )

    def uses_argument(self, default_resolver: str = DEFAULT_RESOLVER) -> bool:
        """
        True when the user comes from a named call argument.

        Args:
            default_resolver: Name of the resolver fed with the call's
                Authentication (GUARD_DEFAULT_RESOLVER)
        """
        return bool(self.user_id_param) and self.user_resolver != default_resolver


@dataclass(frozen=True)
class ScopeRequirement:
    """
    One acceptable scope/role combination for a protected operation.

    Attributes:
        scope_type: Scope tag, matched against lower-cased authority scopes
        roles: Roles accepted within the scope
        user_id_param: See UserResolution
        user_resolver: See UserResolution
    """
    scope_type: str
    roles: frozenset[str]
    user_id_param: str = ""
    user_resolver: str = DEFAULT_RESOLVER
    user_resolution: UserResolution = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.scope_type, str) or not self.scope_type:
            raise InvalidArgumentError("Scope type must be a non-empty string")
        if isinstance(self.roles, str):
            # A bare string would otherwise become a set of characters
            roles = frozenset({self.roles})
        else:
            roles = frozenset(self.roles or ())
        if not roles:
            raise InvalidArgumentError(
                f"Scope requirement '{self.scope_type}' declares no roles"
            )
        object.__setattr__(self, "roles", roles)
        object.__setattr__(
            self,
            "user_resolution",
            UserResolution(self.user_id_param, self.user_resolver),
        )


def group_by_resolution(
    requirements: Iterable[ScopeRequirement],
) -> dict[UserResolution, list[ScopeRequirement]]:
    """
    Partition requirements by their UserResolution.

    Keys keep the order of first occurrence; each group keeps declaration
    order.

    Raises:
        InvalidArgumentError: If requirements is None or holds anything
            other than ScopeRequirement
    """
    if requirements is None:
        raise InvalidArgumentError("Scope requirements are required")

    groups: dict[UserResolution, list[ScopeRequirement]] = {}
    for requirement in requirements:
        if not isinstance(requirement, ScopeRequirement):
            raise InvalidArgumentError(
                f"Expected ScopeRequirement, got {type(requirement).__name__}"
            )
        groups.setdefault(requirement.user_resolution, []).append(requirement)
    return groups
