"""
Guard interfaces - Core abstractions.

These define the contracts between the guard and the application:
- Identifiable: scope objects exposing a stable identity
- UserResolver: turns an input value into the acting user's details
- UserDetails / Authentication: what resolvers consume and produce
- PolicyDecision: non-raising result of an evaluation

Application code implements Identifiable and UserResolver; everything
else is provided.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


# ============================================================
# IDENTITY
# ============================================================

class Identifiable(ABC):
    """
    Capability contract for scope objects.

    The identity string compared against an authority's resource id is
    str(get_id()). Objects that do not implement this contract never
    match any authority.

    Usage:
        class Team(Identifiable):
            def __init__(self, id: str):
                self.id = id

            def get_id(self) -> str:
                return self.id
    """

    @abstractmethod
    def get_id(self) -> Any:
        """Return the object's identity."""
        pass


# ============================================================
# USERS
# ============================================================

@dataclass(frozen=True)
class UserDetails:
    """
    A resolved user.

    Attributes:
        username: Identifier used in diagnostics
        authorities: Raw authority strings (ROLE_<SCOPE>_<ROLE>_<ID>)
    """
    username: str
    authorities: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable of strings but store an immutable tuple
        if isinstance(self.authorities, str):
            authorities = (self.authorities,)
        else:
            authorities = tuple(self.authorities)
        object.__setattr__(self, "authorities", authorities)


@dataclass(frozen=True)
class Authentication:
    """
    The authenticated principal of the current call.

    Passed explicitly to the guard (never read from global state) and
    consumed by the default user resolver.
    """
    principal: Any
    authenticated: bool = True


class UserResolver(ABC):
    """
    Resolves the acting user from an input value.

    The default resolver receives the call's Authentication. Custom
    resolvers receive the value of the call argument named by
    ScopeRequirement.user_id_param.

    Implementations must be stateless and reentrant: the same instance
    may be used by concurrent invocations.

    Usage:
        @GuardRegistry.user_resolver("member")
        class MemberResolver(UserResolver):
            def resolve(self, value: Any) -> UserDetails:
                member = members.get(value)
                return UserDetails(member.email, member.authorities)
    """

    @abstractmethod
    def resolve(self, value: Any) -> UserDetails:
        """
        Resolve a user.

        Raises:
            Exception: Any failure; the guard converts it into a denial
        """
        pass


# ============================================================
# POLICY DECISION
# ============================================================

@dataclass
class PolicyDecision:
    """
    Result of a guard evaluation.

    Attributes:
        allowed: Whether access is permitted
        reason: Human-readable explanation (for errors/logging)
        metadata: Additional data (denial category, operation...)
    """
    allowed: bool
    reason: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls, reason: str | None = None) -> "PolicyDecision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str = "Access denied", **metadata: Any) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, metadata=metadata)
