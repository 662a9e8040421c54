"""
Access decision engine.

Decision rules:
- A requirement is satisfied when the user holds an authority with the
  requirement's scope type, one of its roles, and a resource id equal
  to the identity of the resource's scope object.
- A group (requirements sharing one resolved user) is satisfied when ANY
  of its requirements is satisfied.
- A collection result satisfies a group when EVERY element does; an
  empty collection is allowed.
- Across groups, ALL must be satisfied (see ResourceGuard).
"""

from collections.abc import Iterator, Iterable, Mapping, Sequence
from typing import Any

import structlog

from .authority import ScopeAuthority, matching_authorities, parse_authorities
from .exceptions import (
    AccessResolutionError,
    InvalidArgumentError,
    ResourceNotAccessibleError,
    ScopeResolutionNotFound,
    UserResolutionError,
)
from .interfaces import PolicyDecision, UserDetails
from .requirements import ScopeRequirement
from .scope import identity_of, is_accessible, resolve_scope_object

logger = structlog.get_logger(__name__)


def iter_resources(result: Any) -> Iterable[Any]:
    """
    The values to check for a guarded result: the elements of a
    collection, otherwise the result itself.

    Raises:
        ResourceNotAccessibleError: For one-shot iterators, which cannot
            be checked without consuming the caller's result
    """
    if is_accessible(result) or isinstance(result, (str, bytes, Mapping)):
        return (result,)
    if isinstance(result, Iterator):
        raise ResourceNotAccessibleError(
            result,
            f"Result of type {type(result).__name__} is a one-shot iterator and cannot be guarded",
        )
    if isinstance(result, Iterable):
        return result
    return (result,)


class AccessDecisionEngine:
    """
    Evaluates scope requirements against a user's authorities.

    Stateless; one instance can be shared by every guard.
    """

    def satisfies(
        self,
        requirement: ScopeRequirement,
        authorities: Sequence[ScopeAuthority],
        resource: Any,
    ) -> bool:
        """
        Check a single requirement against one resource.

        An unresolvable or non-identifiable scope object is "not
        satisfied", never an error.

        Raises:
            AccessResolutionError: If the scope accessor raised
        """
        scope_type = requirement.scope_type
        try:
            scope_object = resolve_scope_object(resource, scope_type)
        except ScopeResolutionNotFound as e:
            logger.debug("Scope not resolved", scope_type=scope_type, error=e.message)
            return False

        try:
            identity = identity_of(scope_object)
        except Exception as e:
            raise AccessResolutionError(scope_type, type(resource)) from e

        if identity is None:
            logger.debug(
                "Scope object is not identifiable",
                scope_type=scope_type,
                scope_object_type=type(scope_object).__name__,
            )
            return False

        return any(
            authority.resource_id == identity
            for authority in matching_authorities(authorities, scope_type, requirement.roles)
        )

    def satisfies_group(
        self,
        requirements: Sequence[ScopeRequirement],
        authorities: Sequence[ScopeAuthority],
        resource: Any,
    ) -> bool:
        """
        Check that ANY requirement of a group is satisfied for one resource.

        Raises:
            InvalidArgumentError: If the group is empty
            ResourceNotAccessibleError: If the resource declares no scopes
        """
        if not requirements:
            raise InvalidArgumentError("Scope requirements are empty.")
        if not is_accessible(resource):
            raise ResourceNotAccessibleError(resource)

        return any(
            self.satisfies(requirement, authorities, resource)
            for requirement in requirements
        )

    def evaluate_group(
        self,
        requirements: Sequence[ScopeRequirement],
        user: UserDetails | None,
        result: Any,
    ) -> PolicyDecision:
        """
        Evaluate one resolution group against a guarded result.

        Returns a denied decision when the user lacks access; raises a
        GuardError when the inputs themselves are faulty.

        Raises:
            UserResolutionError: If no user was resolved
            InvalidAuthorityError: If any of the user's authorities is malformed
            InvalidArgumentError: If the group is empty
            ResourceNotAccessibleError: If an element declares no scopes
            AccessResolutionError: If a scope accessor raised
        """
        if user is None:
            raise UserResolutionError("User details is null.")
        if not requirements:
            raise InvalidArgumentError("Scope requirements are empty.")

        resources = list(iter_resources(result))
        if not resources:
            return PolicyDecision.allow("Empty collection")

        authorities = parse_authorities(user.authorities)

        for index, resource in enumerate(resources):
            if not self.satisfies_group(requirements, authorities, resource):
                logger.debug(
                    "User does not have required roles for the defined scopes",
                    username=user.username,
                    authorities=list(user.authorities),
                    scopes=[r.scope_type for r in requirements],
                    element=index,
                )
                return PolicyDecision.deny(
                    "User doesn't have any of the required roles in any of the required scopes.",
                    username=user.username,
                    element=index,
                )

        return PolicyDecision.allow()
