"""
User resolvers.

Available resolvers:
- default: Extracts UserDetails from the call's Authentication

Add custom resolvers with the @GuardRegistry.user_resolver decorator.
"""

from typing import Any

from .exceptions import UserResolutionError
from .interfaces import Authentication, UserDetails, UserResolver
from .registry import GuardRegistry
from .requirements import DEFAULT_RESOLVER


@GuardRegistry.user_resolver(DEFAULT_RESOLVER)
class DefaultUserResolver(UserResolver):
    """
    Resolves the user from an Authentication.

    The principal must be authenticated and be a UserDetails instance.

    Configuration:
        None - this resolver is used whenever a requirement does not
        name both a user id parameter and a custom resolver.
    """

    def __init__(self, **kwargs: Any):
        pass

    def resolve(self, value: Any) -> UserDetails:
        if not isinstance(value, Authentication):
            raise UserResolutionError("Object provided is not an instance of Authentication")

        if value.principal is None or not value.authenticated:
            raise UserResolutionError("User not authenticated")

        if not isinstance(value.principal, UserDetails):
            raise UserResolutionError("Invalid user principal type")

        return value.principal
