"""
Resource guard - Scope-based authorization of operation results.

A protected operation declares the scopes a user must hold on the value
it returns. Authorities are granted per resource instance:

    ROLE_<SCOPE>_<ROLE>_<RESOURCE_ID>   e.g. ROLE_TEAM_ADMIN_b8a0-82a4

Usage Levels:
=============

Level 1: Declare scopes on your models
--------------------------------------
    from resource_guard import Accessible, Identifiable, scope_accessor

    class Team(Identifiable):
        def __init__(self, id: str):
            self.id = id

        def get_id(self) -> str:
            return self.id

    class Project(Accessible):
        def __init__(self, team: Team):
            self.team = team

        @scope_accessor("team")
        def get_team(self) -> Team:
            return self.team

Level 2: Guard an operation
---------------------------
    from resource_guard import Authentication, guard_resource, scope

    @guard_resource(scope("team", "USER", "ADMIN"))
    def get_project(project_id: str, auth: Authentication) -> Project:
        ...

Level 3: Alternative scopes (OR)
--------------------------------
    @guard_resource(scope("subteam", "USER"), scope("team", "ADMIN"))
    def get_subteam(subteam_id: str, auth: Authentication) -> SubTeam:
        ...

Level 4: Several users (AND)
----------------------------
    @GuardRegistry.user_resolver("member")
    class MemberResolver(UserResolver):
        def resolve(self, value) -> UserDetails:
            ...

    @guard_resource(
        scope("team", "ADMIN"),
        scope("team", "USER", user_id_param="member_id", user_resolver="member"),
    )
    def share_project(project_id: str, member_id: str, auth: Authentication) -> Project:
        ...

Level 5: Without decorators
---------------------------
    guard = ResourceGuard(resolvers={"member": MemberResolver()})
    project = guard.check(requirements, project, arguments={...}, authentication=auth)

Configuration:
==============

Environment variables (or .env):
- GUARD_DEFAULT_RESOLVER: "default"
- GUARD_AUTHENTICATION_PARAMS: '["authentication", "auth", "principal"]'
- GUARD_LOG_LEVEL / GUARD_LOG_FORMAT: "INFO" / "text"
- GUARD_DENY_STATUS_CODE / GUARD_EXPOSE_REASON: 403 / false
"""

# Core interfaces (for type hints and custom implementations)
from .interfaces import (
    Identifiable,
    UserResolver,
    UserDetails,
    Authentication,
    PolicyDecision,
)

# Errors
from .exceptions import (
    GuardError,
    AccessDeniedError,
    DenialCategory,
    InvalidAuthorityError,
    ScopeResolutionNotFound,
    AccessResolutionError,
    ResourceNotAccessibleError,
    UserResolutionError,
    InvalidArgumentError,
)

# Registry (for extending with custom implementations)
from .registry import GuardRegistry

# Building blocks
from .authority import ScopeAuthority, parse_authority, parse_authorities
from .scope import Accessible, scope_accessor, resolve_scope_object, identity_of
from .requirements import ScopeRequirement, UserResolution, group_by_resolution
from .decision import AccessDecisionEngine

# Service (main facade)
from .service import ResourceGuard

# Decorators
from .decorators import guard_resource, scope

# Default implementations (auto-registered)
from .resolvers import DefaultUserResolver

# Configuration
from .config import GuardSettings, get_settings

__all__ = [
    # Interfaces
    "Identifiable",
    "UserResolver",
    "UserDetails",
    "Authentication",
    "PolicyDecision",
    # Errors
    "GuardError",
    "AccessDeniedError",
    "DenialCategory",
    "InvalidAuthorityError",
    "ScopeResolutionNotFound",
    "AccessResolutionError",
    "ResourceNotAccessibleError",
    "UserResolutionError",
    "InvalidArgumentError",
    # Registry
    "GuardRegistry",
    # Building blocks
    "ScopeAuthority",
    "parse_authority",
    "parse_authorities",
    "Accessible",
    "scope_accessor",
    "resolve_scope_object",
    "identity_of",
    "ScopeRequirement",
    "UserResolution",
    "group_by_resolution",
    "AccessDecisionEngine",
    # Service
    "ResourceGuard",
    # Decorators
    "guard_resource",
    "scope",
    # Default implementations
    "DefaultUserResolver",
    # Configuration
    "GuardSettings",
    "get_settings",
]
