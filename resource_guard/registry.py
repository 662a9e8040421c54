"""
Guard registry.

Holds the named user resolvers and the scope accessors declared for
resource types. Both are registered with decorators, without modifying
guard code.

Usage:
    @GuardRegistry.user_resolver("member")
    class MemberResolver(UserResolver):
        ...

    @GuardRegistry.scope_accessor(Invoice, "team")
    def invoice_team(invoice: Invoice) -> Team:
        return invoice.team

    # Later, get by name / type:
    resolver = GuardRegistry.get_user_resolver("member")
    accessor = GuardRegistry.get_scope_accessor(Invoice, "team")
"""

import logging
from typing import Type, Callable, Any

from .exceptions import InvalidArgumentError
from .interfaces import UserResolver

logger = logging.getLogger(__name__)

ScopeAccessor = Callable[[Any], Any]


class GuardRegistry:
    """
    Central registry for guard components.

    Registration happens at import time; lookups are read-only
    afterwards, so the registry is safe to share between invocations.
    """

    _user_resolvers: dict[str, Type[UserResolver]] = {}
    _scope_accessors: dict[type, dict[str, ScopeAccessor]] = {}

    # ============================================================
    # REGISTRATION DECORATORS
    # ============================================================

    @classmethod
    def user_resolver(cls, name: str) -> Callable[[Type[UserResolver]], Type[UserResolver]]:
        """
        Decorator to register a user resolver.

        Usage:
            @GuardRegistry.user_resolver("member")
            class MemberResolver(UserResolver):
                ...
        """
        def decorator(resolver_class: Type[UserResolver]) -> Type[UserResolver]:
            if name in cls._user_resolvers:
                logger.warning(f"Overwriting existing user resolver: {name}")
            cls._user_resolvers[name] = resolver_class
            return resolver_class
        return decorator

    @classmethod
    def scope_accessor(cls, resource_type: type, scope_type: str) -> Callable[[ScopeAccessor], ScopeAccessor]:
        """
        Decorator to register a scope accessor for a resource type.

        Usage:
            @GuardRegistry.scope_accessor(Invoice, "team")
            def invoice_team(invoice: Invoice) -> Team:
                return invoice.team
        """
        def decorator(accessor: ScopeAccessor) -> ScopeAccessor:
            cls.register_scope_accessor(resource_type, scope_type, accessor)
            return accessor
        return decorator

    @classmethod
    def register_scope_accessor(
        cls,
        resource_type: type,
        scope_type: str,
        accessor: ScopeAccessor,
    ) -> None:
        """Register `accessor(resource)` as the `scope_type` accessor of `resource_type`."""
        if not isinstance(scope_type, str) or not scope_type:
            raise InvalidArgumentError("Scope type must be a non-empty string")
        cls._scope_accessors.setdefault(resource_type, {})[scope_type] = accessor
        logger.debug(f"Registered scope accessor: {resource_type.__name__}.{scope_type}")

    # ============================================================
    # GETTERS
    # ============================================================

    @classmethod
    def get_user_resolver(cls, name: str, **kwargs: Any) -> UserResolver:
        """
        Get a user resolver by name.

        Args:
            name: Registered name of the resolver
            **kwargs: Arguments to pass to resolver constructor

        Raises:
            ValueError: If resolver not found
        """
        resolver_class = cls._user_resolvers.get(name)
        if not resolver_class:
            available = list(cls._user_resolvers.keys())
            raise ValueError(
                f"Unknown user resolver: '{name}'. "
                f"Available: {available}"
            )
        return resolver_class(**kwargs)

    @classmethod
    def get_scope_accessor(cls, resource_type: type, scope_type: str) -> ScopeAccessor | None:
        """
        Get the accessor for a scope type, walking the MRO so subclasses
        inherit their parents' accessors. Returns None if not declared.
        """
        for klass in resource_type.__mro__:
            accessors = cls._scope_accessors.get(klass)
            if accessors and scope_type in accessors:
                return accessors[scope_type]
        return None

    # ============================================================
    # INTROSPECTION
    # ============================================================

    @classmethod
    def list_user_resolvers(cls) -> list[str]:
        """List all registered user resolver names."""
        return list(cls._user_resolvers.keys())

    @classmethod
    def list_scope_types(cls, resource_type: type) -> list[str]:
        """List the scope types declared for a resource type (including inherited)."""
        scope_types: list[str] = []
        for klass in reversed(resource_type.__mro__):
            for scope_type in cls._scope_accessors.get(klass, {}):
                if scope_type not in scope_types:
                    scope_types.append(scope_type)
        return scope_types

    @classmethod
    def has_user_resolver(cls, name: str) -> bool:
        """Check if a user resolver is registered."""
        return name in cls._user_resolvers

    @classmethod
    def has_scope_accessors(cls, resource_type: type) -> bool:
        """Check if any scope accessor is declared for a resource type."""
        return any(cls._scope_accessors.get(klass) for klass in resource_type.__mro__)
