"""
Scope authority parsing.

Granted authorities are flat strings of the form:

    ROLE_<SCOPE>_<ROLE>_<RESOURCE_ID>

e.g. "ROLE_TEAM_ADMIN_b8a0-82a4" grants ADMIN on team b8a0-82a4.
Only the first two underscores after the prefix are separators, so the
resource id keeps any underscores or hyphens it contains.

Usage:
    from resource_guard.authority import parse_authority, parse_authorities

    authority = parse_authority("ROLE_TEAM_ADMIN_b8a0-82a4_extra")
    authority.scope_type   # "team"
    authority.role         # "ADMIN"
    authority.resource_id  # "b8a0-82a4_extra"
"""

from dataclasses import dataclass
from typing import Iterable, Collection

from .exceptions import InvalidAuthorityError

AUTHORITY_PREFIX = "ROLE_"


@dataclass(frozen=True)
class ScopeAuthority:
    """
    A parsed authority.

    Attributes:
        scope_type: Scope segment, lower-cased (e.g. "team")
        role: Role segment, verbatim (e.g. "ADMIN")
        resource_id: Identity of the scoped resource, verbatim
    """
    scope_type: str
    role: str
    resource_id: str

    def matches(self, scope_type: str, roles: Collection[str]) -> bool:
        """Check scope type and role membership (resource id not compared)."""
        return self.scope_type == scope_type and self.role in roles


def parse_authority(authority: str) -> ScopeAuthority:
    """
    Parse a single authority string.

    Raises:
        InvalidAuthorityError: If the prefix is missing or there are not
            exactly three segments after it
    """
    if not isinstance(authority, str):
        raise InvalidAuthorityError(authority, "not a string")

    if not authority.startswith(AUTHORITY_PREFIX):
        raise InvalidAuthorityError(authority, "missing prefix")

    parts = authority[len(AUTHORITY_PREFIX):].split("_", 2)
    if len(parts) != 3:
        raise InvalidAuthorityError(authority)

    scope_type, role, resource_id = parts
    return ScopeAuthority(scope_type.lower(), role, resource_id)


def parse_authorities(authorities: Iterable[str]) -> list[ScopeAuthority]:
    """
    Parse a batch of authority strings.

    Fails on the first malformed entry instead of skipping it, so a single
    corrupted authority cannot silently shrink a user's privileges.

    Raises:
        InvalidAuthorityError: On the first malformed authority
    """
    return [parse_authority(authority) for authority in authorities]


def matching_authorities(
    authorities: Iterable[ScopeAuthority],
    scope_type: str,
    roles: Collection[str],
) -> list[ScopeAuthority]:
    """Authorities for the given scope type whose role is one of `roles`."""
    return [a for a in authorities if a.matches(scope_type, roles)]
